"""
Extraction du sujet d'un certificat PEM
"""

import base64
import binascii
import re
from typing import Tuple, Union

from cryptography import x509

from .errors import DecodeError, ParseError
from .models import DistinguishedName

CERTIFICATE_LABEL = "CERTIFICATE"

# Premier bloc complet, quel que soit son type; le corps peut être vide
_PEM_BLOCK_RE = re.compile(
    rb"^-----BEGIN (?P<label>[^\r\n]*?)-----[ \t]*\r?\n"
    rb"(?P<body>.*?)"
    rb"^-----END (?P=label)-----",
    re.MULTILINE | re.DOTALL
)


def decode_pem_block(data: Union[bytes, str]) -> Tuple[str, bytes]:
    """
    Décode le premier bloc PEM trouvé

    Le texte qui précède le bloc est ignoré. Les lignes du corps sont
    concaténées avant le décodage base64, quelle que soit leur largeur.

    Returns:
        tuple: (type du bloc, octets DER, éventuellement vides)

    Raises:
        DecodeError: Si aucun bloc complet n'est trouvé ou si le base64 est invalide
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    match = _PEM_BLOCK_RE.search(bytes(data))
    if match is None:
        raise DecodeError("échec du décodage du fichier PEM: aucun bloc trouvé")

    try:
        label = match.group("label").decode("ascii")
    except UnicodeDecodeError as e:
        raise DecodeError("échec du décodage du fichier PEM: type de bloc illisible", cause=e) from e

    body = b"".join(match.group("body").split())
    try:
        der_bytes = base64.b64decode(body, validate=True)
    except binascii.Error as e:
        raise DecodeError(f"échec du décodage du fichier PEM: base64 invalide dans le bloc {label}",
                          cause=e) from e

    return label, der_bytes


def extract_subject(crt: Union[bytes, str]) -> DistinguishedName:
    """
    Retourne le sujet d'un certificat encodé en PEM

    Fonction pure: aucune entrée/sortie en dehors des octets fournis.

    Args:
        crt: Certificat au format PEM

    Returns:
        DistinguishedName: Sujet du certificat

    Raises:
        DecodeError: Si aucun bloc PEM n'est trouvé ou si le premier n'est pas de type CERTIFICATE
        ParseError: Si le contenu DER n'est pas un certificat X.509 valide
    """
    label, der_bytes = decode_pem_block(crt)
    if label != CERTIFICATE_LABEL:
        raise DecodeError(f"échec du décodage du fichier PEM: bloc {label} inattendu")

    try:
        certificate = x509.load_der_x509_certificate(der_bytes)
        subject = certificate.subject
    except ValueError as e:
        raise ParseError("échec de l'analyse du certificat", cause=e) from e

    return DistinguishedName.from_name(subject)


__all__ = ['CERTIFICATE_LABEL', 'decode_pem_block', 'extract_subject']
