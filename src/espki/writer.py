"""
Écriture des fichiers PEM et keystores sur disque
"""

from pathlib import Path
from typing import Union

from . import config, utils
from .errors import WriteError


class PEMWriter:
    """
    Écrit les fichiers produits dans un répertoire de sortie
    Clés privées en 600, certificats et keystores en 644.
    """

    def __init__(self, directory: Union[str, Path] = config.CERTS_DIR):
        self.directory = Path(directory)

    def write(self, name: str, data: bytes, private: bool = False) -> Path:
        """
        Écrit un fichier et applique ses permissions

        Args:
            name: Nom du fichier dans le répertoire de sortie
            data: Contenu
            private: True pour une clé privée (permissions restrictives)

        Returns:
            Path: Chemin du fichier écrit

        Raises:
            WriteError: Si le fichier ne peut pas être écrit
        """
        path = self.directory / name
        permissions = config.PRIVATE_KEY_PERMISSIONS if private else config.CERT_PERMISSIONS

        try:
            utils.ensure_directory(self.directory)
            path.write_bytes(data)
            utils.set_file_permissions(path, permissions)
        except OSError as e:
            raise WriteError(f"échec de l'écriture de {name}", subject=str(path), cause=e) from e

        utils.print_success(f"Fichier écrit: {path.name} ({len(data)} octets)")
        return path

    def read(self, name: str) -> bytes:
        """
        Raises:
            FileNotFoundError: Si le fichier n'existe pas
        """
        return (self.directory / name).read_bytes()


__all__ = ['PEMWriter']
