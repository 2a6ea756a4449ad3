class APIGroups:
    """Centralised Kubernetes metrics API group definitions"""

    EXTERNAL_METRICS = "external.metrics.k8s.io"
    CUSTOM_METRICS = "custom.metrics.k8s.io"
    VERSION = "v1beta1"

    @classmethod
    def group_version(cls, group: str) -> str:
        """Return the "<group>/<version>" string used in apiVersion fields."""
        return f"{group}/{cls.VERSION}"

    @classmethod
    def base_path(cls, group: str) -> str:
        """Return the URL prefix a group is served under."""
        return f"/apis/{cls.group_version(group)}"
