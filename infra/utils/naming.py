"""
Resource naming for the stack.

Pattern: {project}-{environment}-{resource}. GCP service accounts have a
stricter id format, handled by account_id().
"""

import re
from dataclasses import dataclass

# GCP service account ids: 6-30 chars of [a-z0-9-], starting with a letter
ACCOUNT_ID_MAX = 30
ACCOUNT_ID_MIN = 6


@dataclass
class ResourceNamer:
    """
    Derives names for every resource of one stack.

    Attributes:
        project: Project identifier
        environment: Deployment environment (dev, demo, prod)
    """
    project: str
    environment: str

    def name(self, resource: str) -> str:
        """
        Name a resource; an empty resource yields the stack prefix alone.

        Args:
            resource: Resource identifier (e.g., 'vpc', 'notifications')

        Returns:
            Formatted resource name
        """
        prefix = f"{self.project}-{self.environment}"
        return f"{prefix}-{resource}" if resource else prefix

    def bucket_name(self, suffix: str) -> str:
        """Storage bucket names are global and lowercase."""
        return self.name(suffix).lower()

    def account_id(self, resource: str) -> str:
        """
        Derive a GCP service account id.

        Args:
            resource: Resource identifier (e.g., 'lambda')

        Returns:
            Lowercase id truncated to 30 characters, padded when too short

        Raises:
            ValueError: If the derived id does not start with a letter
        """
        account = re.sub(r"[^a-z0-9-]", "-", self.name(resource).lower())
        account = account[:ACCOUNT_ID_MAX].rstrip("-")
        if not account[:1].isalpha():
            raise ValueError(f"Service account id must start with a letter: {account!r}")
        return account.ljust(ACCOUNT_ID_MIN, "0")
