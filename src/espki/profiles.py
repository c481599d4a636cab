"""
Catalogue des profils de certificats d'un cluster Elasticsearch

La configuration (nom du cluster, namespace, organisation, noms de fichiers
et alias) est explicite et passée au catalogue; aucun état global.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from . import config
from .keygen import KeyFormat
from .models import CertificateProfile, DistinguishedName, ExtKeyUsage

SERVER_AND_CLIENT = frozenset({ExtKeyUsage.SERVER_AUTH, ExtKeyUsage.CLIENT_AUTH})


@dataclass(frozen=True)
class FileLayout:
    """Noms des fichiers produits pour un certificat"""
    key: str
    cert: str
    pkcs12: Optional[str] = None
    keystore: Optional[str] = None
    alias: Optional[str] = None

    @property
    def has_keystore(self) -> bool:
        return self.keystore is not None and self.alias is not None


def _default_layouts() -> Dict[str, FileLayout]:
    return {
        "root": FileLayout(key="root-key.pem", cert="root-ca.pem",
                           keystore="root.jks", alias="root-ca"),
        "node": FileLayout(key="node-key.pem", cert="node.pem", pkcs12="node.pkcs12",
                           keystore="node.jks", alias="elasticsearch-node"),
        "node_pem": FileLayout(key="node-key.pem", cert="node.pem"),
        "admin": FileLayout(key="admin-key.pem", cert="admin.pem"),
        "sgadmin": FileLayout(key="sgadmin-key.pem", cert="sgadmin.pem", pkcs12="sgadmin.pkcs12",
                              keystore="sgadmin.jks", alias="elasticsearch-sgadmin"),
        "client": FileLayout(key="client-key.pem", cert="client.pem", pkcs12="client.pkcs12",
                             keystore="client.jks", alias="elasticsearch-client"),
    }


@dataclass(frozen=True)
class CatalogConfig:
    """
    Paramètres d'un déploiement

    Args:
        name: Nom du cluster (offshoot name de l'objet Elasticsearch)
        namespace: Namespace Kubernetes du cluster
        organization: Organisation inscrite dans tous les sujets
        layouts: Noms de fichiers par profil
    """
    name: str
    namespace: str = "default"
    organization: str = config.DEFAULT_ORGANIZATION
    layouts: Dict[str, FileLayout] = field(default_factory=_default_layouts)

    @property
    def service_dns(self) -> str:
        return f"{self.name}.{self.namespace}.svc"


@dataclass(frozen=True)
class CatalogEntry:
    """Profil nommé et fichiers associés"""
    name: str
    profile: CertificateProfile
    files: FileLayout
    key_format: KeyFormat = KeyFormat.PKCS1


class ProfileCatalog:
    """
    Les profils fixes: root, node, node_pem, admin, sgadmin, client
    """

    def __init__(self, catalog_config: CatalogConfig):
        self.config = catalog_config
        self._entries = self._build_entries()

    def _build_entries(self) -> Dict[str, CatalogEntry]:
        cfg = self.config
        org = (cfg.organization,)
        local_and_service = ("localhost", cfg.service_dns)

        # root n'a pas d'usage étendu: c'est une autorité, pas une feuille
        profiles = {
            "root": (CertificateProfile(common_name=config.ROOT_COMMON_NAME, organization=org,
                                        validity=config.CA_VALIDITY), KeyFormat.PKCS1),
            "node": (CertificateProfile(common_name=cfg.name, organization=org,
                                        ext_key_usages=SERVER_AND_CLIENT), KeyFormat.PKCS1),
            "node_pem": (CertificateProfile(common_name=config.NODE_PEM_COMMON_NAME, organization=org,
                                            ext_key_usages=SERVER_AND_CLIENT), KeyFormat.PKCS8),
            "admin": (CertificateProfile(common_name=f"{cfg.name}-admin", organization=org,
                                         san_dns_names=local_and_service,
                                         ext_key_usages=SERVER_AND_CLIENT), KeyFormat.PKCS1),
            "sgadmin": (CertificateProfile(common_name=config.SGADMIN_COMMON_NAME, organization=org,
                                           san_dns_names=("localhost",),
                                           ext_key_usages=SERVER_AND_CLIENT), KeyFormat.PKCS1),
            "client": (CertificateProfile(common_name=cfg.name, organization=org,
                                          san_dns_names=local_and_service,
                                          ext_key_usages=SERVER_AND_CLIENT), KeyFormat.PKCS1),
        }

        return {
            name: CatalogEntry(name=name, profile=profile, files=cfg.layouts[name], key_format=key_format)
            for name, (profile, key_format) in profiles.items()
        }

    @property
    def root(self) -> CatalogEntry:
        return self._entries["root"]

    @property
    def root_subject(self) -> DistinguishedName:
        return self.root.profile.subject

    @property
    def node(self) -> CatalogEntry:
        return self._entries["node"]

    @property
    def node_pem(self) -> CatalogEntry:
        return self._entries["node_pem"]

    @property
    def admin(self) -> CatalogEntry:
        return self._entries["admin"]

    @property
    def sgadmin(self) -> CatalogEntry:
        return self._entries["sgadmin"]

    @property
    def client(self) -> CatalogEntry:
        return self._entries["client"]

    def get(self, name: str) -> CatalogEntry:
        """
        Raises:
            KeyError: Si le profil n'existe pas
        """
        return self._entries[name]

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ['FileLayout', 'CatalogConfig', 'CatalogEntry', 'ProfileCatalog', 'SERVER_AND_CLIENT']
