"""
Certificate Issuer
Signe les certificats feuilles (node, admin, sgadmin, client) avec la Root CA
"""

from datetime import datetime
from typing import Optional

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from . import config, utils
from .errors import EncodingError, InvalidProfileError, SigningError
from .keygen import KeyFormat, KeyGenerator
from .models import CAIdentity, CertificateProfile, IssuedCertificate
from .san import marshal_sans

_CRYPTO_ERRORS = (ValueError, TypeError, UnsupportedAlgorithm)


class CertificateSigner:
    """
    Émetteur de certificats feuilles
    Chaque appel est indépendant: la CA n'est jamais modifiée, chaque
    certificat reçoit son propre numéro de série et sa propre clé.
    """

    def __init__(self, key_gen: Optional[KeyGenerator] = None):
        self.key_gen = key_gen or KeyGenerator()

    # ============================================
    # 📜 SIGNATURE
    # ============================================

    def sign(
            self,
            profile: CertificateProfile,
            subject_key: rsa.RSAPublicKey,
            ca: CAIdentity,
            now: Optional[datetime] = None
    ) -> x509.Certificate:
        """
        Signe un certificat feuille pour la clé publique donnée

        Args:
            profile: Profil du certificat (sujet, SAN, usages)
            subject_key: Clé publique du titulaire
            ca: Root CA signataire
            now: Instant de référence pour la fin de validité (défaut: maintenant)

        Returns:
            x509.Certificate: Certificat signé, relu depuis son encodage DER

        Raises:
            InvalidProfileError: Si le CN ou les usages étendus manquent
            SigningError: Si la construction ou la signature échoue
        """
        self._check_profile(profile)

        try:
            san_value = marshal_sans(profile.san_dns_names, profile.san_emails, profile.san_ips)
        except EncodingError as e:
            raise SigningError("échec de l'encodage du SAN", subject=profile.common_name, cause=e) from e

        ca_cert = ca.certificate
        serial_number = utils.generate_serial_number()
        not_after = utils.as_utc(now) + profile.validity

        try:
            cert_builder = (
                x509.CertificateBuilder()
                .subject_name(profile.subject.to_name())
                .issuer_name(ca_cert.subject)
                .public_key(subject_key)
                .serial_number(serial_number)
                .not_valid_before(ca_cert.not_valid_before_utc)
                .not_valid_after(not_after)
            )
            cert_builder = self._add_extensions(cert_builder, profile, ca, san_value)

            certificate = cert_builder.sign(ca.private_key, hashes.SHA256())
            der_bytes = certificate.public_bytes(serialization.Encoding.DER)
            certificate = x509.load_der_x509_certificate(der_bytes)

        except _CRYPTO_ERRORS as e:
            raise SigningError("échec de la signature du certificat",
                               subject=profile.common_name, cause=e) from e

        utils.print_success(f"Certificat {profile.common_name} signé (SN: {serial_number:X})")
        return certificate

    def _check_profile(self, profile: CertificateProfile) -> None:
        if not profile.common_name:
            raise InvalidProfileError("common_name")
        if not profile.ext_key_usages:
            raise InvalidProfileError("ext_key_usages", subject=profile.common_name)

    def _add_extensions(
            self,
            cert_builder: x509.CertificateBuilder,
            profile: CertificateProfile,
            ca: CAIdentity,
            san_value: bytes
    ) -> x509.CertificateBuilder:
        """Ajoute les extensions d'un certificat feuille"""

        cert_builder = cert_builder.add_extension(
            x509.BasicConstraints(ca=False, path_length=None),
            critical=True
        )

        cert_builder = cert_builder.add_extension(
            x509.KeyUsage(
                digital_signature=True,
                content_commitment=False,
                key_encipherment=True,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=False,
                crl_sign=False,
                encipher_only=False,
                decipher_only=False
            ),
            critical=True
        )

        # Ordre stable: serverAuth avant clientAuth
        usages = sorted(profile.ext_key_usages, key=lambda usage: usage.value, reverse=True)
        cert_builder = cert_builder.add_extension(
            x509.ExtendedKeyUsage([usage.oid for usage in usages]),
            critical=False
        )

        # SAN encodé à la main, ajouté tel quel
        cert_builder = cert_builder.add_extension(
            x509.UnrecognizedExtension(config.SAN_OID, san_value),
            critical=False
        )

        cert_builder = cert_builder.add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(ca.public_key),
            critical=False
        )

        return cert_builder

    # ============================================
    # 🎯 HELPERS
    # ============================================

    def issue(
            self,
            profile: CertificateProfile,
            ca: CAIdentity,
            key_format: KeyFormat = KeyFormat.PKCS1,
            now: Optional[datetime] = None
    ) -> IssuedCertificate:
        """
        Génère une clé neuve et signe le certificat correspondant

        Raises:
            InvalidProfileError: Si le profil est incomplet
            SigningError: Si la génération de clé ou la signature échoue
        """
        self._check_profile(profile)

        try:
            private_key = self.key_gen.generate_rsa_key()
        except _CRYPTO_ERRORS as e:
            raise SigningError("échec de la génération de la clé",
                               subject=profile.common_name, cause=e) from e

        certificate = self.sign(profile, private_key.public_key(), ca, now=now)
        return IssuedCertificate(private_key=private_key, certificate=certificate, key_format=key_format)


# ============================================
# 🔍 VÉRIFICATION
# ============================================

def verify_issued_by(certificate: x509.Certificate, ca: CAIdentity) -> bool:
    """
    Vérifie qu'un certificat a été émis par la CA: émetteur égal au sujet
    de la CA et signature valide sous sa clé publique
    """
    if certificate.issuer != ca.certificate.subject:
        return False

    try:
        ca.public_key.verify(
            certificate.signature,
            certificate.tbs_certificate_bytes,
            padding.PKCS1v15(),
            certificate.signature_hash_algorithm,
        )
    except InvalidSignature:
        return False

    return True


certificate_signer = CertificateSigner()


def sign(
        profile: CertificateProfile,
        subject_key: rsa.RSAPublicKey,
        ca: CAIdentity,
        now: Optional[datetime] = None
) -> x509.Certificate:
    """Raccourci vers ``certificate_signer.sign``"""
    return certificate_signer.sign(profile, subject_key, ca, now=now)


__all__ = ['CertificateSigner', 'certificate_signer', 'sign', 'verify_issued_by']
