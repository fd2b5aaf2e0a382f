"""Constants shared by operators and cluster DNS information."""

# Label used by operators to specify the service.
APP_SELECTOR = "service"
# Label used to record the owner custom resource.
OWNER_SELECTOR = "owner"
# Label used to specify a sub component.
COMPONENT_SELECTOR = "component"
# File name holding service customisations.
CUSTOM_SERVICE_CONFIG_FILE_NAME = "custom.conf"
# File name holding policy rule customisations.
CUSTOM_POLICY_FILE_NAME = "custom.yaml"
# Name of the hash of hashes of all inputs, used to detect input changes.
INPUT_HASH_NAME = "input"
# Key under which a dump of the template parameters is stored in a secret.
TEMPLATE_PARAMETERS = "TemplateParameters"


def get_dns_cluster_domain() -> str:
    """Return the cluster DNS domain name."""
    return "cluster.local"