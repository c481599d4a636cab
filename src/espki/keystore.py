"""
Conversion PEM -> PKCS12 -> JKS
Adaptateur isolé autour des outils externes openssl et keytool
"""

import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional, Protocol

from . import config, utils
from .errors import KeystoreError


class KeystoreConverter(Protocol):
    """Interface attendue par le générateur pour produire un keystore Java"""

    def to_pkcs12(
            self,
            cert_pem: bytes,
            key_pem: bytes,
            passphrase: str,
            alias: Optional[str] = None,
            ca_pem: Optional[bytes] = None
    ) -> bytes:
        ...

    def convert_to_keystore(
            self,
            cert_pem: bytes,
            key_pem: Optional[bytes],
            passphrase: str,
            alias: str,
            ca_pem: Optional[bytes] = None,
            pkcs12: Optional[bytes] = None
    ) -> bytes:
        ...


class OpenSSLKeytoolConverter:
    """
    Convertisseur basé sur ``openssl pkcs12`` et ``keytool``

    Les fichiers intermédiaires vivent dans un répertoire temporaire
    supprimé après chaque conversion.
    """

    def __init__(self, openssl: str = config.OPENSSL_BINARY, keytool: str = config.KEYTOOL_BINARY):
        self.openssl = openssl
        self.keytool = keytool

    # ============================================
    # 🗝️ CONVERSIONS
    # ============================================

    def to_pkcs12(
            self,
            cert_pem: bytes,
            key_pem: bytes,
            passphrase: str,
            alias: Optional[str] = None,
            ca_pem: Optional[bytes] = None
    ) -> bytes:
        """
        Construit un bundle PKCS12 (certificat + clé + CA optionnelle)

        Raises:
            KeystoreError: Si openssl échoue
        """
        self._check_passphrase(passphrase)
        with tempfile.TemporaryDirectory(prefix="espki-") as tmp:
            workdir = Path(tmp)
            out = self._export_pkcs12(workdir, cert_pem, key_pem, passphrase, alias, ca_pem)
            return out.read_bytes()

    def convert_to_keystore(
            self,
            cert_pem: bytes,
            key_pem: Optional[bytes],
            passphrase: str,
            alias: str,
            ca_pem: Optional[bytes] = None,
            pkcs12: Optional[bytes] = None
    ) -> bytes:
        """
        Produit un keystore JKS

        Sans clé privée, le certificat est importé comme certificat de
        confiance (cas de la Root CA); sinon il passe par un PKCS12,
        fourni ou exporté pour l'occasion.

        Args:
            cert_pem: Certificat PEM
            key_pem: Clé privée PEM, ou None pour un truststore
            passphrase: Mot de passe du keystore (non vide)
            alias: Alias de l'entrée (non vide)
            ca_pem: Certificat de la CA à inclure dans la chaîne
            pkcs12: Bundle PKCS12 déjà produit par to_pkcs12 (même alias et
                mot de passe), importé tel quel sans relancer openssl

        Returns:
            bytes: Contenu du fichier JKS

        Raises:
            KeystoreError: Si un paramètre manque ou si un outil échoue
        """
        self._check_passphrase(passphrase)
        if not alias:
            raise KeystoreError("alias vide")

        with tempfile.TemporaryDirectory(prefix="espki-") as tmp:
            workdir = Path(tmp)
            jks_path = workdir / "keystore.jks"

            if key_pem is None:
                cert_path = workdir / "cert.pem"
                cert_path.write_bytes(cert_pem)
                self._run([
                    self.keytool, "-importcert", "-noprompt", "-trustcacerts",
                    "-alias", alias,
                    "-file", str(cert_path),
                    "-keystore", str(jks_path),
                    "-storetype", "JKS",
                    "-storepass", passphrase,
                ], alias)
            else:
                if pkcs12 is not None:
                    p12_path = workdir / "bundle.pkcs12"
                    p12_path.write_bytes(pkcs12)
                else:
                    p12_path = self._export_pkcs12(workdir, cert_pem, key_pem, passphrase, alias, ca_pem)
                self._run([
                    self.keytool, "-importkeystore", "-noprompt",
                    "-srckeystore", str(p12_path),
                    "-srcstoretype", "PKCS12",
                    "-srcstorepass", passphrase,
                    "-srcalias", alias,
                    "-destkeystore", str(jks_path),
                    "-deststoretype", "JKS",
                    "-deststorepass", passphrase,
                    "-destalias", alias,
                ], alias)

            if not jks_path.exists():
                raise KeystoreError("keytool n'a produit aucun keystore", subject=alias)

            utils.print_success(f"Keystore JKS créé (alias: {alias})")
            return jks_path.read_bytes()

    # ============================================
    # 🛠️ HELPERS
    # ============================================

    def _export_pkcs12(
            self,
            workdir: Path,
            cert_pem: bytes,
            key_pem: bytes,
            passphrase: str,
            alias: Optional[str],
            ca_pem: Optional[bytes]
    ) -> Path:
        cert_path = workdir / "cert.pem"
        key_path = workdir / "key.pem"
        out_path = workdir / "bundle.pkcs12"

        cert_path.write_bytes(cert_pem)
        key_path.write_bytes(key_pem)

        args = [self.openssl, "pkcs12", "-export"]
        if ca_pem is not None:
            ca_path = workdir / "ca.pem"
            ca_path.write_bytes(ca_pem)
            args += ["-certfile", str(ca_path)]
        args += ["-inkey", str(key_path), "-in", str(cert_path)]
        if alias:
            args += ["-name", alias]
        args += ["-password", f"pass:{passphrase}", "-out", str(out_path)]

        self._run(args, alias)

        if not out_path.exists():
            raise KeystoreError("openssl n'a produit aucun bundle PKCS12", subject=alias)
        return out_path

    def _run(self, args: List[str], subject: Optional[str]) -> None:
        try:
            subprocess.run(args, check=True, capture_output=True)
        except FileNotFoundError as e:
            raise KeystoreError(f"outil introuvable: {args[0]}", subject=subject, cause=e) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode(errors="replace").strip()
            raise KeystoreError(f"{args[0]} a échoué (code {e.returncode}): {stderr}",
                                subject=subject, cause=e) from e

    @staticmethod
    def _check_passphrase(passphrase: str) -> None:
        if not passphrase:
            raise KeystoreError("mot de passe du keystore vide")


__all__ = ['KeystoreConverter', 'OpenSSLKeytoolConverter']
