#!/usr/bin/env python3
"""
CSR Tool

Creates a private key and Certificate Signing Request (CSR) for a host, and
appends root CA certificates to a signed certificate to build its chain.

Requirements: pip install cryptography colorama termcolor pyfiglet
"""

import argparse
import logging
import os
import sys

from colorama import init
from termcolor import cprint, colored
from pyfiglet import figlet_format

from cert_chain import append_root_certs
from cert_errors import CertificateError
from cert_options import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_SUPPORT_DIR,
    ECDSA_SIG_ALG,
    P256_CURVE,
    P384_CURVE,
    CertOptions,
    load_config,
)
from csr_generator import gen_csr

script_name = "CSR Tool"
_colors_initialized = False


def init_colors():
    """Initialize colorama once per process."""
    global _colors_initialized
    if not _colors_initialized:
        init(strip=not sys.stdout.isatty())  # strip colors if stdout is redirected
        _colors_initialized = True


def create_csr(options, output_csr_path, output_key_path):
    """
    Create a new CSR and private key and save them.

    Args:
        options: CertOptions describing the request
        output_csr_path: Path to save the CSR
        output_key_path: Path to save the private key
    """
    csr_pem, key_pem = gen_csr(options)

    # Save CSR
    with open(output_csr_path, 'wb') as f:
        f.write(csr_pem)

    # Save private key, readable by the owner only
    fd = os.open(output_key_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as f:
        os.fchmod(f.fileno(), 0o600)
        f.write(key_pem)

    cprint("CSR and private key created successfully!", "green")
    print(f"CSR: {output_csr_path}")
    print(f"Private Key: {output_key_path}")


def create_chain(cert_path, root_cert_file, output_path):
    """
    Append the root certificates in root_cert_file to a certificate.

    Args:
        cert_path: Path to the signed PEM certificate (or chain)
        root_cert_file: Path to the PEM root certificates to append
        output_path: Path where the chain will be saved
    """
    with open(cert_path, 'rb') as f:
        pem_cert = f.read()

    chain = append_root_certs(pem_cert, root_cert_file)

    with open(output_path, 'wb') as f:
        f.write(chain)

    cprint("Certificate chain created successfully!", "green")
    print(f"Output: {output_path}")


def build_parser():
    parser = argparse.ArgumentParser(
        description='Create CSRs and assemble certificate chains',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create an RSA CSR for a service
  csr-tool gen-csr --org Acme --host svc.acme.local --output-csr svc.csr --output-key svc.key

  # Create an ECDSA P384 CSR that also carries the host as Common Name
  csr-tool gen-csr --host svc.acme.local --ec-sig-alg ECDSA --ec-curve P384 --dual-use --output-csr svc.csr --output-key svc.key

  # Append the root CA to a signed certificate
  csr-tool append-roots --cert svc.crt --root-cert-file root.crt --output svc-chain.crt
        """
    )
    parser.add_argument("--support_dir", default=DEFAULT_SUPPORT_DIR, help=argparse.SUPPRESS)
    parser.add_argument("--config_file", default=DEFAULT_CONFIG_FILE, help=argparse.SUPPRESS)
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # Create CSR command
    csr_parser = subparsers.add_parser('gen-csr', help='Create a new CSR and private key')
    csr_parser.add_argument('--org', help='Organization (O)')
    csr_parser.add_argument('--host', action='append',
                            help='Subject Alternative Name (DNS, IP or URI). Can be used multiple times or comma separated')
    csr_parser.add_argument('--key-size', type=int, help='RSA key size (default: 2048)')
    csr_parser.add_argument('--ec-sig-alg', choices=[ECDSA_SIG_ALG], help='Generate an EC key instead of RSA')
    csr_parser.add_argument('--ec-curve', choices=[P256_CURVE, P384_CURVE], help='EC curve (default: P256)')
    csr_parser.add_argument('--dual-use', action='store_true', default=None,
                            help='Also set the Common Name from the first host')
    csr_parser.add_argument('--pkcs8', action='store_true', default=None, help='Encode the private key as PKCS8')
    csr_parser.add_argument('--output-csr', required=True, help='Output CSR path')
    csr_parser.add_argument('--output-key', required=True, help='Output private key path')

    # Append roots command
    chain_parser = subparsers.add_parser('append-roots', help='Append root certificates to a certificate')
    chain_parser.add_argument('--cert', required=True, help='Path to the signed certificate')
    chain_parser.add_argument('--root-cert-file', required=True, help='Path to the root certificates')
    chain_parser.add_argument('--output', required=True, help='Output chain path')

    return parser


def main(argv=None):
    """Command-line interface"""
    parser = build_parser()
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        parser.print_help(sys.stderr)
        return 1
    args = parser.parse_args(argv)

    init_colors()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    if args.command is None:
        parser.print_help()
        return 1

    print(colored(figlet_format(script_name, font="slant"), "cyan"))

    try:
        if args.command == 'gen-csr':
            conf_dict = load_config(os.path.join(args.support_dir, args.config_file))
            hosts = ",".join(args.host) if args.host else None
            options = CertOptions.from_config(
                conf_dict,
                org=args.org,
                host=hosts,
                rsa_key_size=args.key_size,
                ec_sig_alg=args.ec_sig_alg,
                ec_curve=args.ec_curve,
                is_dual_use=args.dual_use,
                pkcs8_key=args.pkcs8,
            )
            create_csr(options, args.output_csr, args.output_key)
        elif args.command == 'append-roots':
            create_chain(args.cert, args.root_cert_file, args.output)
    except (CertificateError, ValueError, OSError) as e:
        cprint(f"Error: {e}", "red", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
