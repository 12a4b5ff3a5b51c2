"""Helpers for naming cloud KMS keys and secret manager resources."""

from __future__ import annotations

# Associated data bound to every KMS-protected seed and DEK.
SEED_AAD = b"roughenough-seed"


def extract_aws_region(arn: str) -> str:
    """Return the region field of an AWS ARN such as ``arn:aws:kms:us-east-1:...``."""
    parts = arn.split(":")
    if len(parts) < 4:
        raise ValueError(f"ARN has no region field: {arn}")
    return parts[3]


def extract_secret_parent(resource: str) -> str:
    """Return ``projects/{project}/secrets/{secret}`` from a GCP secret resource name.

    Accepts either the secret itself or one of its versions.
    """
    parts = resource.split("/")
    if len(parts) < 4 or parts[0] != "projects" or parts[2] != "secrets":
        raise ValueError(f"Invalid resource format: {resource}")
    if len(parts) == 4:
        return resource
    return "/".join(parts[:4])