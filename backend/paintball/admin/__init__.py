from paintball.admin.catalog import (
    CreateAddonArgs,
    CreatePackageArgs,
    CreateResourceArgs,
    UpdateAddonArgs,
    UpdatePackageArgs,
    UpdateResourceArgs,
    create_addon,
    create_package,
    create_resource,
    list_addons,
    list_packages,
    list_resources,
    update_addon,
    update_package,
    update_resource,
)
from paintball.admin.clients import (
    CreateClientArgs,
    MergeClientsArgs,
    UpdateClientArgs,
    create_client,
    list_clients,
    merge_clients,
    update_client,
)
from paintball.admin.settings import (
    UpdateSettingsArgs,
    get_venue_settings,
    pricing_rules_for,
    serialize_settings,
    update_venue_settings,
)

__all__ = [
    "CreateAddonArgs",
    "CreatePackageArgs",
    "CreateResourceArgs",
    "UpdateAddonArgs",
    "UpdatePackageArgs",
    "UpdateResourceArgs",
    "create_addon",
    "create_package",
    "create_resource",
    "list_addons",
    "list_packages",
    "list_resources",
    "update_addon",
    "update_package",
    "update_resource",
    "CreateClientArgs",
    "MergeClientsArgs",
    "UpdateClientArgs",
    "create_client",
    "list_clients",
    "merge_clients",
    "update_client",
    "UpdateSettingsArgs",
    "get_venue_settings",
    "pricing_rules_for",
    "serialize_settings",
    "update_venue_settings",
]
