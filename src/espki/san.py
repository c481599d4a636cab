"""
Encodeur de l'extension SubjectAltName (RFC 5280, GeneralNames)

L'extension est construite directement au niveau ASN.1 avec pyasn1 pour
pouvoir y ajouter l'entrée registeredID brute attendue par Search Guard,
ce que x509.SubjectAlternativeName ne permet pas de contrôler à l'octet près.
"""

import ipaddress
from typing import Iterable, List, Tuple, Union

from pyasn1.codec.der import decoder, encoder
from pyasn1.error import PyAsn1Error
from pyasn1_modules import rfc5280

from . import config
from .errors import EncodingError

IPInput = Union[str, bytes, ipaddress.IPv4Address, ipaddress.IPv6Address]


def _ip_bytes(ip: IPInput) -> bytes:
    """
    Forme binaire d'une adresse IP pour iPAddress [7]

    Les adresses IPv4 (y compris IPv4-mapped IPv6) sont toujours encodées
    sur 4 octets, les IPv6 sur 16.
    """
    if isinstance(ip, (bytes, bytearray)):
        if len(ip) not in (4, 16):
            raise EncodingError(f"longueur d'adresse IP invalide: {len(ip)} octets")
        ip = ipaddress.ip_address(bytes(ip))
    elif isinstance(ip, str):
        try:
            ip = ipaddress.ip_address(ip)
        except ValueError as e:
            raise EncodingError(f"adresse IP invalide: {ip!r}", cause=e) from e
    elif not isinstance(ip, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        raise EncodingError(f"type d'adresse IP non supporté: {type(ip).__name__}")

    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped.packed
    return ip.packed


def _general_name(kind: str, value) -> rfc5280.GeneralName:
    name = rfc5280.GeneralName()
    name.setComponentByName(kind, value)
    return name


def marshal_sans(
        dns_names: Iterable[str] = (),
        email_addresses: Iterable[str] = (),
        ip_addresses: Iterable[IPInput] = ()
) -> bytes:
    """
    Encode la valeur DER d'une extension SubjectAltName

    Ordre fixe: noms DNS (dNSName [2]), adresses e-mail (rfc822Name [1]),
    adresses IP (iPAddress [7]), puis le marqueur registeredID
    ``88 05 2A 03 04 05 05`` (OID 1.2.3.4.5.5).

    Args:
        dns_names: Noms DNS
        email_addresses: Adresses e-mail
        ip_addresses: Adresses IP (objets ipaddress, chaînes ou 4/16 octets bruts)

    Returns:
        bytes: SEQUENCE DER, contenu de l'OCTET STRING de l'extension 2.5.29.17

    Raises:
        EncodingError: Si une entrée ne peut pas être encodée
    """
    try:
        entries = [_general_name('dNSName', name) for name in dns_names]
        entries += [_general_name('rfc822Name', email) for email in email_addresses]
        entries += [_general_name('iPAddress', _ip_bytes(ip)) for ip in ip_addresses]

        marker, rest = decoder.decode(config.SAN_VENDOR_MARKER, asn1Spec=rfc5280.GeneralName())
        if rest:
            raise EncodingError("marqueur SAN mal formé")
        entries.append(marker)

        names = rfc5280.SubjectAltName()
        for idx, entry in enumerate(entries):
            names.setComponentByPosition(idx, entry)

        return encoder.encode(names)

    except (PyAsn1Error, UnicodeError) as e:
        raise EncodingError("échec du marshaling DER du SAN", cause=e) from e


def decode_sans(der_bytes: bytes) -> List[Tuple[str, object]]:
    """
    Décode la valeur DER d'une extension SubjectAltName

    Returns:
        list: Paires (type, valeur) dans l'ordre d'encodage; les IP sont des
        objets ipaddress, registeredID est rendu en notation pointée

    Raises:
        EncodingError: Si les octets ne forment pas un GeneralNames valide
    """
    try:
        names, rest = decoder.decode(der_bytes, asn1Spec=rfc5280.SubjectAltName())
    except PyAsn1Error as e:
        raise EncodingError("SAN illisible", cause=e) from e
    if rest:
        raise EncodingError(f"{len(rest)} octets en trop après le SAN")

    result = []
    for name in names:
        kind = name.getName()
        component = name.getComponent()
        if kind in ('dNSName', 'rfc822Name', 'uniformResourceIdentifier', 'registeredID'):
            value = str(component)
        elif kind == 'iPAddress':
            try:
                value = ipaddress.ip_address(bytes(component))
            except ValueError:
                value = bytes(component)
        else:
            value = encoder.encode(component)
        result.append((kind, value))

    return result


__all__ = ['marshal_sans', 'decode_sans']
