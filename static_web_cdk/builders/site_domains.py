"""
Domain names served by the static site.

The certificate and the DNS alias records are both built from one
SiteDomains value, so the www alias is either present on both or on
neither.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Tuple
from static_web_cdk.configs.error_handler import ErrorHandler, TopologyError

WWW_PREFIX = "www."


@dataclass(frozen=True)
class SiteDomains:
    """
    Primary domain plus the optional www alias.

    Attributes:
        domain_name: Primary domain, e.g. example.com
        include_www: Whether www.<domain_name> is served too
    """
    domain_name: str
    include_www: bool

    @property
    def www_domain(self) -> str:
        return f"{WWW_PREFIX}{self.domain_name}"

    @property
    def alternate_names(self) -> Tuple[str, ...]:
        """Subject alternative names for the certificate."""
        return (self.www_domain,) if self.include_www else ()

    @property
    def aliases(self) -> Tuple[str, ...]:
        """Every name the distribution answers for, primary first."""
        return (self.domain_name, *self.alternate_names)


def site_domains(domain_name: str, include_www: bool) -> SiteDomains:
    """
    Build the domain set for a site.

    Args:
        domain_name: Primary domain
        include_www: Whether to add the www alias

    Returns:
        Validated SiteDomains

    Raises:
        ValueError: If the domain is empty or the flag is not a boolean
        TopologyError: If the www alias would be derived from a www domain
    """
    ErrorHandler.validate_string_not_empty(domain_name, "domain_name", "Site")
    ErrorHandler.validate_boolean(include_www, "include_www", "Site")
    domain_name = domain_name.strip().lower().rstrip(".")
    if include_www and domain_name.startswith(WWW_PREFIX):
        raise TopologyError(
            f"include_www is set but domain '{domain_name}' already starts with '{WWW_PREFIX}'"
        )
    return SiteDomains(domain_name=domain_name, include_www=include_www)


def ensure_alias_agreement(
        certificate_names: Iterable[str],
        record_names: Iterable[str]
    ) -> None:
    """
    Check that the certificate and the DNS alias records cover the same names.

    Args:
        certificate_names: Primary name and SANs requested on the certificate
        record_names: Names that get an alias record

    Raises:
        TopologyError: If one set has a name the other lacks
    """
    cert = set(certificate_names)
    records = set(record_names)
    if cert != records:
        only_cert = ", ".join(sorted(cert - records)) or "-"
        only_records = ", ".join(sorted(records - cert)) or "-"
        raise TopologyError(
            "Certificate names and DNS alias records disagree "
            f"(certificate only: {only_cert}; records only: {only_records})"
        )
