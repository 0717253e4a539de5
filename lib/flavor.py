"""
Cluster flavor detection.

Identifies what kind of Kubernetes cluster the installer is talking to
(local development cluster, managed cloud offering, ...) from the kubeconfig
context name, node labels and the API server version. Detection never fails:
a cluster that cannot be classified is reported as Kind.UNKNOWN.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, TypeVar

from lib.constants import (
    LABEL_AKS_CLUSTER,
    LABEL_EKS_NODEGROUP,
    LABEL_EKSCTL_CLUSTER_NAME,
    LABEL_GKE_NODEPOOL,
    LABEL_INSTANCE_TYPE,
    LABEL_MINIKUBE_NAME,
    LOGGER_NAME,
)
from lib.context import OperationContext
from lib.exceptions import OperationCancelledError

T = TypeVar("T")

_EKS_ARN = re.compile(r"^arn:aws[a-z-]*:eks:[^:]+:\d+:cluster/(?P<name>.+)$")
_EKSCTL_CONTEXT = re.compile(r"@(?P<name>[^.@]+)\.[a-z0-9-]+\.eksctl\.io$")


class Kind(str, Enum):
    """Kinds of Kubernetes clusters the installer knows about."""

    UNKNOWN = "unknown"
    MINIKUBE = "minikube"
    KIND = "kind"
    EKS = "eks"
    GKE = "gke"
    AKS = "aks"
    MICROK8S = "microk8s"
    RANCHER_DESKTOP = "rancher-desktop"
    K3S = "k3s"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Flavor:
    """Detected cluster kind plus the cluster name inferred by the detector."""

    kind: Kind = Kind.UNKNOWN
    cluster_name: str = ""


def flavor_from_context_name(context_name: str) -> Flavor:
    """Classify a cluster from its kubeconfig context name."""
    if not context_name:
        return Flavor()

    if context_name == "minikube":
        return Flavor(Kind.MINIKUBE, context_name)
    if context_name.startswith("kind-"):
        return Flavor(Kind.KIND, context_name[len("kind-") :])
    if context_name == "microk8s":
        return Flavor(Kind.MICROK8S, context_name)
    if context_name == "rancher-desktop":
        return Flavor(Kind.RANCHER_DESKTOP, context_name)

    if context_name.startswith("gke_"):
        parts = context_name.split("_", 3)
        if len(parts) == 4 and parts[3]:
            return Flavor(Kind.GKE, parts[3])

    match = _EKS_ARN.match(context_name) or _EKSCTL_CONTEXT.search(context_name)
    if match:
        return Flavor(Kind.EKS, match.group("name"))

    return Flavor()


def flavor_from_nodes(nodes: List[Dict], context_name: str = "") -> Flavor:
    """Classify a cluster from node labels and provider IDs."""
    for node in nodes:
        labels = (node.get("metadata") or {}).get("labels") or {}
        provider_id = (node.get("spec") or {}).get("provider_id") or ""

        if LABEL_EKS_NODEGROUP in labels or provider_id.startswith("aws://"):
            return Flavor(Kind.EKS, labels.get(LABEL_EKSCTL_CLUSTER_NAME, ""))
        if LABEL_GKE_NODEPOOL in labels or provider_id.startswith("gce://"):
            return Flavor(Kind.GKE)
        if LABEL_AKS_CLUSTER in labels or provider_id.startswith("azure://"):
            return Flavor(Kind.AKS, context_name)
        if LABEL_MINIKUBE_NAME in labels:
            return Flavor(Kind.MINIKUBE, labels[LABEL_MINIKUBE_NAME])
        if labels.get(LABEL_INSTANCE_TYPE) == "k3s":
            return Flavor(Kind.K3S)

    return Flavor()


def flavor_from_server_version(git_version: str) -> Flavor:
    """Classify a cluster from the API server gitVersion ("v1.29.3-eks-adc7111")."""
    if "-eks-" in git_version:
        return Flavor(Kind.EKS)
    if "-gke." in git_version:
        return Flavor(Kind.GKE)
    if "+k3s" in git_version:
        return Flavor(Kind.K3S)
    return Flavor()


class FlavorDetector:
    """Detects the cluster flavor through a KubeClient."""

    def __init__(self, kube_client: Any, logger: Optional[logging.Logger] = None) -> None:
        self.client = kube_client
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def _probe(self, description: str, fn: Callable[[], T], default: T) -> T:
        try:
            return fn()
        except OperationCancelledError:
            raise
        except Exception as exc:  # probe failures degrade to "unknown"
            self.logger.debug("Flavor probe %s failed: %s", description, exc)
            return default

    def detect_flavor(self, ctx: OperationContext) -> Flavor:
        """
        Detect the flavor of the cluster behind the client.

        Returns:
            The detected Flavor (Kind.UNKNOWN when nothing matches)

        Raises:
            OperationCancelledError: If ctx is cancelled or expires
        """
        ctx.check("flavor detection")
        context_name = getattr(self.client, "context_name", "") or ""

        flavor = flavor_from_context_name(context_name)
        if flavor.kind is not Kind.UNKNOWN:
            return flavor

        ctx.check("flavor detection")
        nodes = self._probe("list nodes", lambda: self.client.list_nodes(ctx=ctx), [])
        flavor = flavor_from_nodes(nodes, context_name)
        if flavor.kind is not Kind.UNKNOWN:
            return flavor

        ctx.check("flavor detection")
        version = self._probe("server version", lambda: self.client.get_server_version(ctx=ctx), {})
        return flavor_from_server_version(version.get("git_version") or "")
