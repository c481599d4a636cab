"""
Exceptions du générateur de certificats

Chaque erreur porte un message, éventuellement le certificat ou le champ
concerné, et la cause d'origine (également chaînée via ``raise ... from``).
"""

from typing import Optional


class PKIError(Exception):
    """Erreur de base du système PKI"""

    def __init__(
            self,
            message: str,
            subject: Optional[str] = None,
            cause: Optional[BaseException] = None
    ):
        self.message = message
        self.subject = subject
        self.cause = cause
        super().__init__(str(self))

    def __str__(self) -> str:
        text = self.message
        if self.subject:
            text = f"{self.subject}: {text}"
        if self.cause is not None:
            text = f"{text} (cause: {self.cause})"
        return text


class InvalidProfileError(PKIError):
    """Profil de certificat incomplet (erreur de l'appelant)"""

    def __init__(self, field: str, subject: Optional[str] = None):
        self.field = field
        super().__init__(f"champ requis manquant: {field}", subject=subject)


class EncodingError(PKIError):
    """Échec du marshaling DER de l'extension SAN"""


class SigningError(PKIError):
    """Échec de la génération ou de la signature d'un certificat feuille"""


class CAGenerationError(PKIError):
    """Échec de la création de la Root CA"""


class DecodeError(PKIError):
    """Bloc PEM absent ou de mauvais type"""


class ParseError(PKIError):
    """Contenu DER d'un certificat illisible"""


class KeystoreError(PKIError):
    """Échec de la conversion PKCS12/JKS par les outils externes"""


class WriteError(PKIError):
    """Échec de l'écriture d'un fichier PEM ou keystore"""


__all__ = [
    'PKIError',
    'InvalidProfileError',
    'EncodingError',
    'SigningError',
    'CAGenerationError',
    'DecodeError',
    'ParseError',
    'KeystoreError',
    'WriteError',
]
