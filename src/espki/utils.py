"""
Fonctions utilitaires du générateur de certificats
"""

import os
import secrets
import string
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from . import config

# Console Rich pour l'affichage
console = Console()


def set_quiet(quiet: bool = True) -> None:
    """Active ou coupe tous les messages console"""
    console.quiet = quiet


# ============================================
# 🔐 FONCTIONS CRYPTOGRAPHIQUES
# ============================================

def generate_serial_number() -> int:
    """
    Génère un numéro de série pour un certificat
    Tiré uniformément dans [1, 2^63) par un générateur cryptographiquement sûr.
    Aucun suivi d'unicité: une collision est improbable, pas impossible.

    Returns:
        int: Numéro de série
    """
    return secrets.randbelow(config.MAX_SERIAL - 1) + 1


def generate_password(length: int = config.PASSPHRASE_LENGTH) -> str:
    """
    Génère une phrase de passe alphanumérique pour les keystores

    Args:
        length: Longueur de la phrase de passe

    Returns:
        str: Phrase de passe aléatoire
    """
    alphabet = string.ascii_letters + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def calculate_fingerprint(cert: x509.Certificate) -> str:
    """
    Calcule l'empreinte SHA-256 d'un certificat

    Returns:
        str: Empreinte hexadécimale avec séparateurs (ex: "A1:B2:C3:...")
    """
    fingerprint = cert.fingerprint(hashes.SHA256()).hex().upper()
    return ':'.join(fingerprint[i:i + 2] for i in range(0, len(fingerprint), 2))


# ============================================
# 📁 GESTION DES FICHIERS
# ============================================

def ensure_directory(path: Path) -> None:
    """Crée un répertoire et ses parents s'ils n'existent pas"""
    path.mkdir(mode=config.DIR_PERMISSIONS, parents=True, exist_ok=True)


def set_file_permissions(filepath: Path, permissions: int) -> None:
    """
    Définit les permissions d'un fichier (Unix uniquement)
    Sur Windows, cette fonction ne fait rien

    Args:
        filepath: Chemin du fichier
        permissions: Permissions en octal (ex: 0o600 pour rw-------)
    """
    if os.name != 'nt':
        os.chmod(filepath, permissions)


# ============================================
# 📅 GESTION DES DATES
# ============================================

def now_utc() -> datetime:
    """
    Retourne la date/heure actuelle en UTC, tronquée à la seconde
    (précision des dates X.509)
    """
    return datetime.now(timezone.utc).replace(microsecond=0)


def as_utc(dt: Optional[datetime]) -> datetime:
    """Normalise une date en UTC; None donne l'heure courante"""
    if dt is None:
        return now_utc()
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


# ============================================
# 🎨 AFFICHAGE CLI AVEC RICH
# ============================================

def _print(level: str, message: str) -> None:
    color = config.CLI_COLORS[level]
    console.print(f"[{color}]{config.CLI_SYMBOLS[level]} {message}[/{color}]")


def print_success(message: str) -> None:
    """Affiche un message de succès avec symbole et couleur verte"""
    _print('success', message)


def print_error(message: str) -> None:
    """Affiche un message d'erreur avec symbole et couleur rouge"""
    _print('error', message)


def print_warning(message: str) -> None:
    """Affiche un avertissement avec symbole et couleur jaune"""
    _print('warning', message)


def print_info(message: str) -> None:
    """Affiche une information avec symbole et couleur cyan"""
    _print('info', message)


def print_header(title: str) -> None:
    """
    Affiche un en-tête stylisé avec bordure

    Args:
        title: Titre à afficher
    """
    console.print()
    console.print(Panel.fit(
        f"[{config.CLI_COLORS['header']}]{title}[/]",
        border_style="magenta",
        box=box.DOUBLE
    ))
    console.print()


def create_table(title: str, columns: list) -> Table:
    """
    Crée une table Rich stylisée prête à être remplie

    Args:
        title: Titre de la table
        columns: Liste des noms de colonnes

    Returns:
        Table: Table Rich
    """
    table = Table(
        title=title,
        title_style="bold cyan",
        border_style="blue",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    for col in columns:
        table.add_column(col)

    return table


def format_general_name(name: x509.GeneralName) -> str:
    """Valeur lisible d'une entrée SAN (OID en notation pointée)"""
    value = name.value
    if isinstance(value, x509.ObjectIdentifier):
        return value.dotted_string
    return str(value)


def display_cert_info(cert: x509.Certificate) -> None:
    """
    Affiche les informations d'un certificat X.509 de manière formatée

    Args:
        cert: Certificat X.509 à afficher
    """
    table = create_table(f"{config.CLI_SYMBOLS['cert']} Informations du certificat", ["Champ", "Valeur"])

    table.add_row("Sujet", f"[cyan]{cert.subject.rfc4514_string()}[/cyan]")
    table.add_row("Émetteur", f"[yellow]{cert.issuer.rfc4514_string()}[/yellow]")
    table.add_row("N° Série", f"[green]{cert.serial_number:X}[/green]")

    not_before = cert.not_valid_before_utc.strftime("%Y-%m-%d %H:%M:%S UTC")
    not_after = cert.not_valid_after_utc.strftime("%Y-%m-%d %H:%M:%S UTC")
    table.add_row("Valide de", not_before)
    table.add_row("Valide jusqu'à", not_after)

    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
        table.add_row("SAN", ", ".join(format_general_name(name) for name in san))
    except x509.ExtensionNotFound:
        pass

    table.add_row("Empreinte SHA-256", f"[dim]{calculate_fingerprint(cert)}[/dim]")

    console.print(table)


__all__ = [
    # Crypto
    'generate_serial_number', 'generate_password', 'calculate_fingerprint',

    # Fichiers
    'ensure_directory', 'set_file_permissions',

    # Dates
    'now_utc', 'as_utc',

    # Affichage CLI
    'print_success', 'print_error', 'print_warning', 'print_info', 'print_header',
    'create_table', 'format_general_name', 'display_cert_info', 'set_quiet',

    # Console Rich
    'console'
]
