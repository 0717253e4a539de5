"""
Kubernetes client wrapper for cluster flavor detection.

Only read-only calls live here: the pre-flight stage must never mutate the
cluster. Transient API failures are retried at the transport level; callers
above this module never retry. When an OperationContext is passed, request
timeouts, retries and back-off all stay within its deadline.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)
from urllib3.exceptions import HTTPError

from lib.constants import API_RETRY_ATTEMPTS, API_RETRY_MAX_WAIT, DEFAULT_REQUEST_TIMEOUT, LOGGER_NAME
from lib.context import OperationContext
from lib.exceptions import TransientError

logger = logging.getLogger(LOGGER_NAME)

T = TypeVar("T")


def is_retryable_error(exception: BaseException) -> bool:
    """Check if exception is retryable."""
    if isinstance(exception, ApiException):
        # Retry on server errors (5xx) and too many requests (429)
        return 500 <= exception.status < 600 or exception.status == 429
    if isinstance(exception, HTTPError):
        return True
    return False


def _should_retry(exception: BaseException) -> bool:
    """Custom retry condition using is_retryable_error."""
    if not isinstance(exception, Exception):
        return False
    return is_retryable_error(exception)


def api_retrying(ctx: Optional[OperationContext] = None) -> Retrying:
    """
    Build the retry policy for one API call.

    Without a deadline this is a fixed number of attempts with exponential
    back-off. With one, retries also stop once the deadline passes and no
    back-off sleep runs past it.
    """
    stop = stop_after_attempt(API_RETRY_ATTEMPTS)
    wait = wait_exponential(multiplier=1, min=1, max=API_RETRY_MAX_WAIT)

    remaining = ctx.remaining() if ctx is not None else None
    if remaining is not None:
        stop = stop | stop_after_delay(remaining)
        backoff = wait

        def wait(retry_state: Any) -> float:
            return min(backoff(retry_state), ctx.remaining() or 0.0)

    return Retrying(
        retry=retry_if_exception(_should_retry),
        wait=wait,
        stop=stop,
        before_sleep=before_sleep_log(logger, logging.DEBUG),
        reraise=True,
    )


def _active_context_name(context: Optional[str]) -> str:
    """Return the explicit context or the kubeconfig's current context name."""
    if context:
        return context
    try:
        _contexts, active = config.list_kube_config_contexts()
    except (config.ConfigException, OSError) as exc:
        logger.debug("Unable to read kubeconfig contexts: %s", exc)
        return ""
    if not active:
        return ""
    return active.get("name", "") or ""


class KubeClient:
    """Read-only wrapper for the Kubernetes API used during pre-flight."""

    def __init__(
        self,
        context: Optional[str] = None,
        request_timeout: int = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        """
        Initialize Kubernetes client for specific context.

        Args:
            context: Kubernetes context name (None for the current context)
            request_timeout: API request timeout in seconds
        """
        self.context = context
        self.request_timeout = request_timeout

        config.load_kube_config(context=context)
        self.context_name = _active_context_name(context)

        # Per-instance configuration avoids affecting other clients
        configuration = client.Configuration.get_default_copy()
        api_client = client.ApiClient(configuration)
        self.core_v1 = client.CoreV1Api(api_client)
        self.version_api = client.VersionApi(api_client)

        logger.info(
            "Initialized Kubernetes client for context: %s (timeout: %ss)",
            self.context_name or "default",
            request_timeout,
        )

    def _timeout(self, ctx: Optional[OperationContext], operation: str) -> float:
        """Check ctx and return the request timeout bounded by its deadline."""
        if ctx is None:
            return self.request_timeout
        ctx.check(operation)
        return ctx.remaining(self.request_timeout)

    def _call(self, ctx: Optional[OperationContext], fn: Callable[..., T], *args: Any) -> T:
        try:
            return api_retrying(ctx)(fn, *args)
        except Exception as exc:
            if is_retryable_error(exc):
                raise TransientError(f"Kubernetes API call failed after retries: {exc}") from exc
            raise

    def get_server_version(self, ctx: Optional[OperationContext] = None) -> Dict[str, Any]:
        """Return the API server version info (gitVersion, platform, ...).

        Raises:
            TransientError: If the API stayed unavailable through all retries
            OperationCancelledError: If ctx is cancelled or expires
        """
        return self._call(ctx, self._get_server_version, ctx)

    def _get_server_version(self, ctx: Optional[OperationContext]) -> Dict[str, Any]:
        timeout = self._timeout(ctx, "reading server version")
        info = self.version_api.get_code(_request_timeout=timeout)
        return info.to_dict()

    def list_nodes(
        self,
        label_selector: Optional[str] = None,
        ctx: Optional[OperationContext] = None,
    ) -> List[Dict]:
        """
        List cluster nodes.

        Args:
            label_selector: Optional label selector
            ctx: Operation context bounding requests and retries

        Returns:
            List of node dicts (empty if the caller may not list nodes)

        Raises:
            TransientError: If the API stayed unavailable through all retries
            OperationCancelledError: If ctx is cancelled or expires
        """
        return self._call(ctx, self._list_nodes, label_selector, ctx)

    def _list_nodes(self, label_selector: Optional[str], ctx: Optional[OperationContext]) -> List[Dict]:
        items: List[Dict] = []
        continue_token: Optional[str] = None

        while True:
            timeout = self._timeout(ctx, "listing nodes")
            try:
                result = self.core_v1.list_node(
                    label_selector=label_selector,
                    _continue=continue_token,
                    _request_timeout=timeout,
                )
            except ApiException as e:
                if e.status in (403, 404):
                    logger.debug("Cannot list nodes (status=%s): %s", e.status, e.reason)
                    return []
                raise

            items.extend(node.to_dict() for node in result.items)
            continue_token = result.metadata._continue if result.metadata else None
            if not continue_token:
                break

        return items
