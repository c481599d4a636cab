"""
Modèles de données pour le générateur de certificats
Classes représentant les entités du système
"""

import enum
import ipaddress
from dataclasses import dataclass, field
from datetime import timedelta
from typing import FrozenSet, Tuple, Union

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from . import config
from .keygen import KeyFormat, encode_private_key_pem

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class ExtKeyUsage(enum.Enum):
    """Usages étendus autorisés pour un certificat feuille"""
    SERVER_AUTH = "server_auth"
    CLIENT_AUTH = "client_auth"

    @property
    def oid(self) -> x509.ObjectIdentifier:
        if self is ExtKeyUsage.SERVER_AUTH:
            return ExtendedKeyUsageOID.SERVER_AUTH
        return ExtendedKeyUsageOID.CLIENT_AUTH


def _as_tuple(value) -> tuple:
    """Une chaîne seule est une valeur, pas une suite de caractères"""
    if isinstance(value, str):
        return (value,)
    return tuple(value)


# Ordre des attributs dans le Name construit (comme pkix.Name)
_NAME_ATTRIBUTES = (
    ("country", NameOID.COUNTRY_NAME),
    ("organization", NameOID.ORGANIZATION_NAME),
    ("organizational_unit", NameOID.ORGANIZATIONAL_UNIT_NAME),
    ("locality", NameOID.LOCALITY_NAME),
    ("province", NameOID.STATE_OR_PROVINCE_NAME),
)


@dataclass(frozen=True)
class DistinguishedName:
    """
    Représente un Distinguished Name (DN) X.509

    Les attributs multi-valués (organization, etc.) sont des tuples pour
    que deux DN égaux se comparent égaux.
    """
    common_name: str
    organization: Tuple[str, ...] = ()
    organizational_unit: Tuple[str, ...] = ()
    country: Tuple[str, ...] = ()
    province: Tuple[str, ...] = ()
    locality: Tuple[str, ...] = ()

    def __post_init__(self):
        for attr, _ in _NAME_ATTRIBUTES:
            object.__setattr__(self, attr, _as_tuple(getattr(self, attr)))

    def to_name(self) -> x509.Name:
        """Convertit le DN en x509.Name"""
        attributes = []
        for attr, oid in _NAME_ATTRIBUTES:
            for value in getattr(self, attr):
                attributes.append(x509.NameAttribute(oid, value))
        if self.common_name:
            attributes.append(x509.NameAttribute(NameOID.COMMON_NAME, self.common_name))
        return x509.Name(attributes)

    @classmethod
    def from_name(cls, name: x509.Name) -> "DistinguishedName":
        """Construit un DN à partir d'un x509.Name"""

        def values(oid):
            return tuple(str(a.value) for a in name.get_attributes_for_oid(oid))

        common_names = values(NameOID.COMMON_NAME)
        return cls(
            common_name=common_names[0] if common_names else "",
            **{attr: values(oid) for attr, oid in _NAME_ATTRIBUTES}
        )

    def to_string(self) -> str:
        """Convertit le DN en chaîne RFC4514"""
        return self.to_name().rfc4514_string()

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class CertificateProfile:
    """
    Description immuable d'un certificat à émettre
    """
    common_name: str
    organization: Tuple[str, ...] = ()
    san_dns_names: Tuple[str, ...] = ()
    san_emails: Tuple[str, ...] = ()
    san_ips: Tuple[IPAddress, ...] = ()
    ext_key_usages: FrozenSet[ExtKeyUsage] = frozenset()
    validity: timedelta = config.LEAF_VALIDITY

    def __post_init__(self):
        for attr in ("organization", "san_dns_names", "san_emails"):
            object.__setattr__(self, attr, _as_tuple(getattr(self, attr)))
        san_ips = self.san_ips
        if isinstance(san_ips, (str, bytes, ipaddress.IPv4Address, ipaddress.IPv6Address)):
            san_ips = (san_ips,)
        object.__setattr__(
            self, "san_ips", tuple(ipaddress.ip_address(ip) for ip in san_ips)
        )
        object.__setattr__(self, "ext_key_usages", frozenset(self.ext_key_usages))

    @property
    def subject(self) -> DistinguishedName:
        return DistinguishedName(common_name=self.common_name, organization=self.organization)


@dataclass(frozen=True)
class CAIdentity:
    """
    Root CA: clé privée + certificat auto-signé
    Immuable une fois créée; changer de CA impose de réémettre les feuilles.
    """
    private_key: rsa.RSAPrivateKey
    certificate: x509.Certificate

    @property
    def public_key(self) -> rsa.RSAPublicKey:
        return self.private_key.public_key()

    @property
    def subject(self) -> DistinguishedName:
        return DistinguishedName.from_name(self.certificate.subject)

    def cert_pem(self) -> bytes:
        return self.certificate.public_bytes(serialization.Encoding.PEM)


@dataclass(frozen=True)
class IssuedCertificate:
    """Certificat feuille signé et sa clé privée"""
    private_key: rsa.RSAPrivateKey
    certificate: x509.Certificate
    key_format: KeyFormat = field(default=KeyFormat.PKCS1)

    def cert_pem(self) -> bytes:
        return self.certificate.public_bytes(serialization.Encoding.PEM)

    def key_pem(self) -> bytes:
        return encode_private_key_pem(self.private_key, self.key_format)


__all__ = [
    'IPAddress',
    'ExtKeyUsage',
    'KeyFormat',
    'DistinguishedName',
    'CertificateProfile',
    'CAIdentity',
    'IssuedCertificate',
]
