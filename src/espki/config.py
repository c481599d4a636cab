"""
Configuration globale du générateur de certificats
Contient toutes les constantes et paramètres du projet
"""

from pathlib import Path
from datetime import timedelta

from cryptography import x509
from cryptography.x509.oid import ExtensionOID

# ============================================
# 📁 CHEMINS DES RÉPERTOIRES
# ============================================

# Répertoire de sortie par défaut (relatif au répertoire courant)
CERTS_DIR = Path("tmp") / "certs"

# ============================================
# 🔐 PARAMÈTRES CRYPTOGRAPHIQUES
# ============================================

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537

# Les numéros de série sont tirés dans [1, 2^63)
MAX_SERIAL = 2 ** 63

# ============================================
# 📜 PARAMÈTRES DES CERTIFICATS X.509
# ============================================

LEAF_VALIDITY = timedelta(days=365)
CA_VALIDITY = timedelta(days=365 * 10)

# Extension SubjectAltName (2.5.29.17)
SAN_OID: x509.ObjectIdentifier = ExtensionOID.SUBJECT_ALTERNATIVE_NAME

# registeredID [8] OID 1.2.3.4.5.5, attendu par Search Guard dans le SAN
# des certificats de noeud
# ref: https://github.com/floragunncom/search-guard-docs/blob/master/tls_certificates_production.md#using-an-oid-value-as-san-entry
SAN_VENDOR_MARKER = bytes([0x88, 0x05, 0x2A, 0x03, 0x04, 0x05, 0x05])

# ============================================
# 📝 INFORMATIONS DN (Distinguished Name)
# ============================================

DEFAULT_ORGANIZATION = "Elasticsearch Operator"
ROOT_COMMON_NAME = "KubeDB Com. Root CA"
NODE_PEM_COMMON_NAME = "AppsCode"
SGADMIN_COMMON_NAME = "sgadmin"

# ============================================
# 🗝️ KEYSTORES
# ============================================

PASSPHRASE_LENGTH = 6
OPENSSL_BINARY = "openssl"
KEYTOOL_BINARY = "keytool"

# ============================================
# 🔒 SÉCURITÉ
# ============================================

PRIVATE_KEY_PERMISSIONS = 0o600  # rw-------
CERT_PERMISSIONS = 0o644  # rw-r--r--
DIR_PERMISSIONS = 0o755  # rwxr-xr-x

# ============================================
# 🎨 PARAMÈTRES D'AFFICHAGE CLI
# ============================================

CLI_COLORS = {
    "success": "green",
    "error": "red",
    "warning": "yellow",
    "info": "cyan",
    "header": "magenta bold",
}

CLI_SYMBOLS = {
    "success": "✓",
    "error": "✗",
    "warning": "⚠",
    "info": "ℹ",
    "cert": "📜",
    "key": "🔑",
    "root": "👑",
    "node": "🖥️",
    "client": "👤",
    "keystore": "🗝️",
}

__all__ = [
    'CERTS_DIR',
    'RSA_KEY_SIZE', 'RSA_PUBLIC_EXPONENT', 'MAX_SERIAL',
    'LEAF_VALIDITY', 'CA_VALIDITY', 'SAN_OID', 'SAN_VENDOR_MARKER',
    'DEFAULT_ORGANIZATION', 'ROOT_COMMON_NAME', 'NODE_PEM_COMMON_NAME', 'SGADMIN_COMMON_NAME',
    'PASSPHRASE_LENGTH', 'OPENSSL_BINARY', 'KEYTOOL_BINARY',
    'PRIVATE_KEY_PERMISSIONS', 'CERT_PERMISSIONS', 'DIR_PERMISSIONS',
    'CLI_COLORS', 'CLI_SYMBOLS',
]
