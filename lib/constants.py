"""Centralized constants for the cluster networking installer."""

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPT = 130

LOGGER_NAME = "net_installer"

# Timeouts (in seconds)
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_OPERATION_TIMEOUT = 300
TOOL_DEFAULT_TIMEOUT = 60

# Kubernetes API retries (transport level only)
API_RETRY_ATTEMPTS = 3
API_RETRY_MAX_WAIT = 10

# Chart version used when the caller does not pin one
DEFAULT_CHART_VERSION = "1.16.3"

# Datapath modes
DATAPATH_TUNNEL = "tunnel"
DATAPATH_AWS_ENI = "aws-eni"
DATAPATH_GKE = "gke"
DATAPATH_AZURE = "azure"
DATAPATH_AKS_BYOCNI = "aks-byocni"

# kube-proxy replacement
KUBE_PROXY_REPLACEMENT_DISABLED = "disabled"

# Encryption modes
ENCRYPTION_DISABLED = "disabled"
ENCRYPTION_IPSEC = "ipsec"
ENCRYPTION_WIREGUARD = "wireguard"
ENCRYPTION_MODES = (ENCRYPTION_DISABLED, ENCRYPTION_IPSEC, ENCRYPTION_WIREGUARD)

# Flag used to skip a single validation check
DISABLE_CHECK_FLAG = "--disable-check"

# Minimum tool versions for flavor checks
MINIKUBE_MIN_VERSION = "1.5.2"
KIND_MIN_VERSION = "0.7.0"
AZURE_CLI_MIN_VERSION = "2.0.0"

# Node labels used for flavor detection
LABEL_EKS_NODEGROUP = "eks.amazonaws.com/nodegroup"
LABEL_EKSCTL_CLUSTER_NAME = "alpha.eksctl.io/cluster-name"
LABEL_GKE_NODEPOOL = "cloud.google.com/gke-nodepool"
LABEL_AKS_CLUSTER = "kubernetes.azure.com/cluster"
LABEL_MINIKUBE_NAME = "minikube.k8s.io/name"
LABEL_INSTANCE_TYPE = "node.kubernetes.io/instance-type"

# AKS network plugin reported for bring-your-own-CNI clusters
AKS_BYOCNI_NETWORK_PLUGIN = "none"
