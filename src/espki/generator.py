"""
Générateur des certificats d'un cluster Elasticsearch
Orchestration: Root CA, puis un certificat par profil du catalogue,
écrits sur disque et convertis en keystores Java si demandé.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from tqdm import tqdm

from . import config, utils
from .certificate_issuer import CertificateSigner
from .keygen import encode_cert_pem, encode_private_key_pem
from .keystore import KeystoreConverter
from .models import CAIdentity, IssuedCertificate
from .profiles import CatalogEntry, ProfileCatalog
from .root_ca import CAIssuer
from .writer import PEMWriter


@dataclass
class GenerationResult:
    """Fichiers produits par une génération complète"""
    ca: CAIdentity
    passphrase: str
    files: Dict[str, List[Path]] = field(default_factory=dict)


class CertificateGenerator:
    """
    Produit l'ensemble des fichiers PEM/JKS d'un déploiement
    """

    def __init__(
            self,
            catalog: ProfileCatalog,
            directory: Union[str, Path] = config.CERTS_DIR,
            converter: Optional[KeystoreConverter] = None,
            writer: Optional[PEMWriter] = None,
            signer: Optional[CertificateSigner] = None,
            ca_issuer: Optional[CAIssuer] = None
    ):
        self.catalog = catalog
        self.writer = writer or PEMWriter(directory)
        self.converter = converter
        self.signer = signer or CertificateSigner()
        self.ca_issuer = ca_issuer or CAIssuer()

    # ============================================
    # 👑 ROOT CA
    # ============================================

    def create_ca(self) -> Tuple[CAIdentity, str, List[Path]]:
        """
        Crée la Root CA, écrit sa clé et son certificat, puis le truststore JKS

        Returns:
            tuple: (CA, phrase de passe des keystores, fichiers écrits)
        """
        entry = self.catalog.root
        ca = self.ca_issuer.issue_ca(entry.profile.subject, validity=entry.profile.validity)

        paths = [
            self.writer.write(entry.files.key, encode_private_key_pem(ca.private_key, entry.key_format),
                              private=True),
            self.writer.write(entry.files.cert, ca.cert_pem()),
        ]

        passphrase = utils.generate_password()

        if entry.files.has_keystore and self._can_convert(entry):
            jks = self.converter.convert_to_keystore(ca.cert_pem(), None, passphrase, entry.files.alias)
            paths.append(self.writer.write(entry.files.keystore, jks))

        return ca, passphrase, paths

    # ============================================
    # 📜 CERTIFICATS FEUILLES
    # ============================================

    def create_node_jks(self, ca: CAIdentity, passphrase: str) -> List[Path]:
        return self._create(self.catalog.node, ca, passphrase)

    def create_node_pem(self, ca: CAIdentity) -> List[Path]:
        return self._create(self.catalog.node_pem, ca)

    def create_admin_pem(self, ca: CAIdentity) -> List[Path]:
        return self._create(self.catalog.admin, ca)

    def create_sgadmin_jks(self, ca: CAIdentity, passphrase: str) -> List[Path]:
        return self._create(self.catalog.sgadmin, ca, passphrase)

    def create_client_jks(self, ca: CAIdentity, passphrase: str) -> List[Path]:
        return self._create(self.catalog.client, ca, passphrase)

    def _create(self, entry: CatalogEntry, ca: CAIdentity, passphrase: Optional[str] = None) -> List[Path]:
        """Émet le certificat d'un profil et écrit ses fichiers"""
        utils.print_header(f"{config.CLI_SYMBOLS['cert']} Certificat {entry.name}")

        issued = self.signer.issue(entry.profile, ca, key_format=entry.key_format)

        paths = [
            self.writer.write(entry.files.key, issued.key_pem(), private=True),
            self.writer.write(entry.files.cert, issued.cert_pem()),
        ]

        if passphrase is not None and entry.files.has_keystore and self._can_convert(entry):
            paths.extend(self._write_keystores(entry, issued, ca, passphrase))

        return paths

    def _write_keystores(
            self,
            entry: CatalogEntry,
            issued: IssuedCertificate,
            ca: CAIdentity,
            passphrase: str
    ) -> List[Path]:
        paths = []
        ca_pem = encode_cert_pem(ca.certificate)

        # Le JKS est importé depuis le PKCS12 écrit sur disque
        bundle = None
        if entry.files.pkcs12:
            bundle = self.converter.to_pkcs12(issued.cert_pem(), issued.key_pem(), passphrase,
                                              alias=entry.files.alias, ca_pem=ca_pem)
            paths.append(self.writer.write(entry.files.pkcs12, bundle, private=True))

        jks = self.converter.convert_to_keystore(issued.cert_pem(), issued.key_pem(), passphrase,
                                                 entry.files.alias, ca_pem=ca_pem, pkcs12=bundle)
        paths.append(self.writer.write(entry.files.keystore, jks, private=True))

        return paths

    def _can_convert(self, entry: CatalogEntry) -> bool:
        if self.converter is None:
            utils.print_warning(f"Aucun convertisseur de keystore: {entry.files.keystore} ignoré")
            return False
        return True

    # ============================================
    # 🎯 GÉNÉRATION COMPLÈTE
    # ============================================

    def generate_all(self, pem_only: bool = False) -> GenerationResult:
        """
        Crée la CA puis tous les certificats du catalogue

        Args:
            pem_only: Ne produire que les fichiers PEM (node en PKCS#8, admin)

        Returns:
            GenerationResult: CA, phrase de passe et fichiers par profil
        """
        ca, passphrase, root_paths = self.create_ca()
        result = GenerationResult(ca=ca, passphrase=passphrase, files={"root": root_paths})

        if pem_only:
            steps = [
                ("node_pem", lambda: self.create_node_pem(ca)),
                ("admin", lambda: self.create_admin_pem(ca)),
            ]
        else:
            steps = [
                ("node", lambda: self.create_node_jks(ca, passphrase)),
                ("admin", lambda: self.create_admin_pem(ca)),
                ("sgadmin", lambda: self.create_sgadmin_jks(ca, passphrase)),
                ("client", lambda: self.create_client_jks(ca, passphrase)),
            ]

        with tqdm(total=len(steps), desc="Certificats", disable=utils.console.quiet) as pbar:
            for name, step in steps:
                result.files[name] = step()
                pbar.update(1)

        utils.print_success(f"{sum(len(p) for p in result.files.values())} fichiers générés "
                            f"dans {self.writer.directory}")
        return result


__all__ = ['CertificateGenerator', 'GenerationResult']
