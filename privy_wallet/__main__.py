#!/usr/bin/env python3
"""
Privy Wallet CLI

Usage:
    python -m privy_wallet generate-keys
    python -m privy_wallet generate-authorization-key
    python -m privy_wallet export WALLET_ID

Examples:
    # Export a wallet using PRIVY_APP_ID / PRIVY_APP_SECRET / PRIVY_AUTHORIZATION_KEY from .env
    python -m privy_wallet export wallet-id

    # Use a precomputed signature instead of a local authorization key
    python -m privy_wallet export wallet-id --signature MEUCIQ...

    # Create a key to register as a wallet owner
    python -m privy_wallet generate-authorization-key
"""

import argparse
import logging
import sys

from dotenv import load_dotenv


def setup_logging(verbose: bool = False, quiet: bool = False):
    """Configure logging based on verbosity."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def cmd_generate_keys(args) -> int:
    from privy_wallet.core.signing.keys import generate_keypair

    keys = generate_keypair()
    print(keys.public_key)
    return 0


def cmd_generate_authorization_key(args) -> int:
    from privy_wallet.core.signing.keys import generate_authorization_key

    private_key, public_key = generate_authorization_key()
    print(f"PRIVY_AUTHORIZATION_KEY={private_key}")
    print(f"Public key: {public_key}")
    return 0


def cmd_export(args) -> int:
    from privy_wallet.api_client import PrivyAPIClient
    from privy_wallet.config import get_settings
    from privy_wallet.core.signing.context import AuthorizationContext
    from privy_wallet.errors import ApiError, AuthorizationError, HpkeError, PrivyError

    logger = logging.getLogger(__name__)

    context = None
    if args.authorization_key:
        context = AuthorizationContext(authorization_private_keys=args.authorization_key)

    try:
        with PrivyAPIClient(settings=get_settings(), authorization_context=context) as client:
            secret = client.wallets.export(args.wallet_id, authorization_signature=args.signature)
    except AuthorizationError as e:
        logger.error(f"Authorization failed: {e}")
        return 1
    except HpkeError as e:
        logger.error(f"Decryption failed: {e}")
        return 1
    except ApiError as e:
        logger.error(f"API error: {e}")
        return 1
    except PrivyError as e:
        logger.error(f"Export failed: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    print(secret.decode("utf-8", errors="replace"))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="privy_wallet",
        description="Privy wallet API client: signed requests and HPKE wallet export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Warnings and errors only")

    subparsers = parser.add_subparsers(dest="command", required=True)

    gen = subparsers.add_parser("generate-keys", help="Print a fresh ephemeral HPKE public key")
    gen.set_defaults(func=cmd_generate_keys)

    gen_auth = subparsers.add_parser(
        "generate-authorization-key", help="Create a new P-256 authorization key"
    )
    gen_auth.set_defaults(func=cmd_generate_authorization_key)

    export = subparsers.add_parser("export", help="Export and decrypt a wallet private key")
    export.add_argument("wallet_id", help="Wallet ID to export")
    export.add_argument(
        "--authorization-key",
        action="append",
        help="Authorization key (wallet-auth:...), may be repeated. Default: PRIVY_AUTHORIZATION_KEY",
    )
    export.add_argument("--signature", help="Precomputed authorization signature")
    export.set_defaults(func=cmd_export)

    return parser


def main(argv=None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
