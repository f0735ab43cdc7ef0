"""Translation and asset lookups for component display."""

from typing import Optional

from appflow.model.components import FileProps, UIComponent
from appflow.model.project import Asset, ProjectResources


def find_asset(resources: ProjectResources, asset_id: Optional[str]) -> Optional[Asset]:
    if not asset_id:
        return None
    return next((asset for asset in resources.assets if asset.id == asset_id), None)


def resolve_text(
    component: UIComponent,
    resources: ProjectResources,
    language: Optional[str] = None,
) -> str:
    """Text shown for a component in ``language``.

    Falls back to the first translated value, then to the key itself. A
    component without a known translation key shows its label.
    """
    key = component.props.translation_key
    if not key:
        return component.label

    translation = next((t for t in resources.translations if t.key == key), None)
    if translation is None:
        return component.label

    language = language or resources.default_language
    value = translation.values.get(language)
    if value:
        return value
    for value in translation.values.values():
        if value:
            return value
    return translation.key


def resolve_src(component: UIComponent, resources: ProjectResources) -> Optional[str]:
    """Image source: the referenced asset's URL, else ``props.src``."""
    asset = find_asset(resources, component.props.asset_id)
    if asset is not None:
        return asset.url
    return component.props.src


def resolve_file(component: UIComponent, resources: ProjectResources) -> Optional[Asset]:
    """The downloadable asset behind a File component."""
    props = component.props
    if not isinstance(props, FileProps):
        return None
    return find_asset(resources, props.file_id)
