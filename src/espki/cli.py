"""
Interface en ligne de commande

    espki generate --name es-demo --namespace demo
    espki generate --pem-only
    espki subject tmp/certs/node.pem
    espki demo
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__, config, utils
from .errors import PKIError
from .generator import CertificateGenerator
from .keystore import OpenSSLKeytoolConverter
from .profiles import CatalogConfig, ProfileCatalog
from .subject import extract_subject


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="espki",
        description="Génère la Root CA et les certificats d'un cluster Elasticsearch"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-q", "--quiet", action="store_true", help="aucun affichage console")

    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="crée la CA et tous les certificats")
    gen.add_argument("--dir", type=Path, default=config.CERTS_DIR, help="répertoire de sortie")
    gen.add_argument("--name", default="elasticsearch", help="nom du cluster")
    gen.add_argument("--namespace", default="default", help="namespace Kubernetes")
    gen.add_argument("--organization", default=config.DEFAULT_ORGANIZATION)
    gen.add_argument("--pem-only", action="store_true", help="pas de PKCS12/JKS")

    subj = sub.add_parser("subject", help="affiche le sujet d'un certificat PEM")
    subj.add_argument("file", type=Path)

    demo = sub.add_parser("demo", help="CA + certificat node PEM, puis relecture du sujet")
    demo.add_argument("--dir", type=Path, default=Path("tmp"))

    return parser


def cmd_generate(args: argparse.Namespace) -> int:
    catalog = ProfileCatalog(CatalogConfig(
        name=args.name,
        namespace=args.namespace,
        organization=args.organization,
    ))
    converter = None if args.pem_only else OpenSSLKeytoolConverter()
    generator = CertificateGenerator(catalog, directory=args.dir, converter=converter)

    result = generator.generate_all(pem_only=args.pem_only)

    table = utils.create_table(f"{config.CLI_SYMBOLS['cert']} Fichiers générés", ["Profil", "Fichiers"])
    for name, paths in result.files.items():
        table.add_row(name, ", ".join(p.name for p in paths))
    utils.console.print(table)

    if not args.pem_only:
        utils.print_info(f"Mot de passe des keystores: {result.passphrase}")
    return 0


def cmd_subject(args: argparse.Namespace) -> int:
    subject = extract_subject(args.file.read_bytes())
    # Sortie destinée aux scripts: toujours affichée
    print(subject.to_string())
    return 0


def cmd_demo(args: argparse.Namespace) -> int:
    catalog = ProfileCatalog(CatalogConfig(name="elasticsearch"))
    generator = CertificateGenerator(catalog, directory=args.dir)

    ca, _, _ = generator.create_ca()
    generator.create_node_pem(ca)

    node = generator.writer.read(catalog.node_pem.files.cert)
    print(extract_subject(node).to_string())
    return 0


COMMANDS = {
    "generate": cmd_generate,
    "subject": cmd_subject,
    "demo": cmd_demo,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    utils.set_quiet(args.quiet)

    try:
        return COMMANDS[args.command](args)
    except PKIError as e:
        utils.print_error(str(e))
        return 1
    except FileNotFoundError as e:
        utils.print_error(f"Fichier introuvable: {e.filename}")
        return 1
    except KeyboardInterrupt:
        utils.print_warning("Opération annulée")
        return 130


if __name__ == "__main__":
    sys.exit(main())
