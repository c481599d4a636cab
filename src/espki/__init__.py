"""
espki - PKI interne d'un cluster Elasticsearch
==============================================

Génère une Root CA auto-signée et les certificats feuilles (node, admin,
sgadmin, client) qu'elle signe, avec une extension SubjectAltName
construite au niveau ASN.1.

Modules principaux:
- config: Constantes globales
- san: Encodeur de l'extension SubjectAltName
- root_ca: Création de la Root CA
- certificate_issuer: Signature des certificats feuilles
- subject: Extraction du sujet d'un certificat PEM
- profiles: Catalogue des profils de certificats
- keystore, writer, generator: Fichiers PEM/PKCS12/JKS
"""

__version__ = "1.0.0"

from . import config
from . import utils
from .errors import (
    PKIError,
    InvalidProfileError,
    EncodingError,
    SigningError,
    CAGenerationError,
    DecodeError,
    ParseError,
    KeystoreError,
    WriteError,
)
from .keygen import KeyFormat, KeyGenerator
from .models import CAIdentity, CertificateProfile, DistinguishedName, ExtKeyUsage, IssuedCertificate
from .san import marshal_sans, decode_sans
from .root_ca import CAIssuer, issue_ca, verify_self_signed
from .certificate_issuer import CertificateSigner, sign, verify_issued_by
from .subject import extract_subject
from .profiles import CatalogConfig, CatalogEntry, FileLayout, ProfileCatalog

__all__ = [
    'config',
    'utils',
    'PKIError',
    'InvalidProfileError',
    'EncodingError',
    'SigningError',
    'CAGenerationError',
    'DecodeError',
    'ParseError',
    'KeystoreError',
    'WriteError',
    'KeyFormat',
    'KeyGenerator',
    'CAIdentity',
    'CertificateProfile',
    'DistinguishedName',
    'ExtKeyUsage',
    'IssuedCertificate',
    'marshal_sans',
    'decode_sans',
    'CAIssuer',
    'issue_ca',
    'verify_self_signed',
    'CertificateSigner',
    'sign',
    'verify_issued_by',
    'extract_subject',
    'CatalogConfig',
    'CatalogEntry',
    'FileLayout',
    'ProfileCatalog',
]
