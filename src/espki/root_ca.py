"""
Root CA (Certificate Authority)
Crée la paire clé/certificat auto-signé qui signe tous les certificats feuilles
"""

from datetime import datetime, timedelta
from typing import Optional

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from . import config, utils
from .errors import CAGenerationError
from .keygen import KeyGenerator
from .models import CAIdentity, DistinguishedName


class CAIssuer:
    """
    Émetteur de la Root CA (Autorité de Certification Racine)
    """

    def __init__(self, key_gen: Optional[KeyGenerator] = None):
        self.key_gen = key_gen or KeyGenerator()

    # ============================================
    # 👑 CRÉATION ROOT CA
    # ============================================

    def issue_ca(
            self,
            subject: DistinguishedName,
            validity: timedelta = config.CA_VALIDITY,
            now: Optional[datetime] = None
    ) -> CAIdentity:
        """
        Crée une Root CA complète (clé + certificat auto-signé)

        Args:
            subject: Distinguished Name de la Root CA (sujet == émetteur)
            validity: Durée de validité (défaut: 10 ans)
            now: Début de validité (défaut: maintenant, UTC)

        Returns:
            CAIdentity: Clé privée et certificat de la CA

        Raises:
            CAGenerationError: Si la génération de clé ou l'auto-signature échoue
        """
        utils.print_header(f"{config.CLI_SYMBOLS['root']} Création de la Root CA")

        try:
            private_key = self.key_gen.generate_rsa_key()
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise CAGenerationError("échec de la génération de la clé de la CA",
                                    subject=subject.common_name, cause=e) from e

        try:
            certificate = self._build_root_certificate(private_key, subject, validity, utils.as_utc(now))
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise CAGenerationError("échec de la création du certificat de la CA",
                                    subject=subject.common_name, cause=e) from e

        utils.print_success("Root CA créée avec succès")
        utils.display_cert_info(certificate)

        return CAIdentity(private_key=private_key, certificate=certificate)

    def _build_root_certificate(
            self,
            private_key: rsa.RSAPrivateKey,
            subject: DistinguishedName,
            validity: timedelta,
            not_before: datetime
    ) -> x509.Certificate:
        """Construit et auto-signe le certificat X.509v3 de la Root CA"""

        name = subject.to_name()
        serial_number = utils.generate_serial_number()

        cert_builder = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(private_key.public_key())
            .serial_number(serial_number)
            .not_valid_before(not_before)
            .not_valid_after(not_before + validity)
        )

        # BasicConstraints CA=TRUE, sans limite de profondeur
        cert_builder = cert_builder.add_extension(
            x509.BasicConstraints(ca=True, path_length=None),
            critical=True
        )

        cert_builder = cert_builder.add_extension(
            x509.KeyUsage(
                digital_signature=True,
                content_commitment=False,
                key_encipherment=True,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=True,
                crl_sign=False,
                encipher_only=False,
                decipher_only=False
            ),
            critical=True
        )

        cert_builder = cert_builder.add_extension(
            x509.SubjectKeyIdentifier.from_public_key(private_key.public_key()),
            critical=False
        )

        certificate = cert_builder.sign(private_key=private_key, algorithm=hashes.SHA256())
        utils.print_success(f"Certificat construit (SN: {serial_number:X})")

        return certificate


# ============================================
# 🔍 VALIDATION ROOT CA
# ============================================

def verify_self_signed(ca: CAIdentity) -> bool:
    """
    Vérifie que le certificat de la CA est auto-signé et que sa signature
    est valide sous sa propre clé publique
    """
    certificate = ca.certificate
    if certificate.subject != certificate.issuer:
        return False

    try:
        certificate.public_key().verify(
            certificate.signature,
            certificate.tbs_certificate_bytes,
            padding.PKCS1v15(),
            certificate.signature_hash_algorithm,
        )
    except InvalidSignature:
        return False

    return True


ca_issuer = CAIssuer()


def issue_ca(subject: DistinguishedName, **kwargs) -> CAIdentity:
    """Raccourci vers ``ca_issuer.issue_ca``"""
    return ca_issuer.issue_ca(subject, **kwargs)


__all__ = ['CAIssuer', 'ca_issuer', 'issue_ca', 'verify_self_signed']
