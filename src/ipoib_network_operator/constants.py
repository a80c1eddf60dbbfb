"""Constants for the IPoIB Network Operator."""

# API Group
API_GROUP = "mellanox.com"
API_VERSION = "v1alpha1"

# Resource Kinds
KIND_IPOIB_NETWORK = "IPoIBNetwork"
PLURAL_IPOIB_NETWORK = "ipoibnetworks"

# Network attachment definitions (Multus)
NAD_GROUP = "k8s.cni.cncf.io"
NAD_VERSION = "v1"
NAD_GROUP_VERSION = f"{NAD_GROUP}/{NAD_VERSION}"
KIND_NETWORK_ATTACHMENT_DEFINITION = "NetworkAttachmentDefinition"
PLURAL_NETWORK_ATTACHMENT_DEFINITION = "network-attachment-definitions"

DEFAULT_NETWORK_NAMESPACE = "default"
CNI_VERSION = "0.3.1"
CNI_TYPE_IPOIB = "ipoib"

# Sync states, also used as status.state values
STATE_READY = "ready"
STATE_NOT_READY = "notReady"
STATE_IGNORE = "ignore"
STATE_RESET = "reset"
STATE_ERROR = "error"

# State names
STATE_NAME_IPOIB_NETWORK = "state-ipoib-network"

# Labels
LABEL_MANAGED_BY = "nvidia.network-operator/managed-by"
LABEL_STATE = "nvidia.network-operator/state"

# Controller name used in logs and field managers
CONTROLLER_NAME = "ipoib-network-operator"
FIELD_MANAGER = CONTROLLER_NAME

# Event Reasons
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_STATE_CHANGED = "StateChanged"
EVENT_REASON_SYNC_FAILED = "SyncFailed"
