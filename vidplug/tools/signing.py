"""
Plugin Signing - Sign the built script with OpenSSL.

The host verifies a plugin by checking ``scriptSignature`` (base64 SHA-512
RSA signature of the script) against ``scriptPublicKey`` (the PEM body of
the public key). The private key lives in ``.secrets/signing_key.pem`` and
is generated on first use.
"""

import base64
import logging
from pathlib import Path
from typing import NamedTuple

from vidplug.core.config_manager import ConfigManager
from vidplug.core.config_schemas import PluginConfig
from vidplug.core.exceptions import ToolingError
from vidplug.tools.project import ProjectLayout
from vidplug.tools.shell import command_exists, ensure_dir, exec_command, get_install_instructions


logger = logging.getLogger(__name__)


KEY_BITS = 2048


class SigningResult(NamedTuple):
    """Outcome of a signing run."""

    key_path: Path
    key_generated: bool
    signature: str
    public_key: str
    config: PluginConfig


def check_openssl() -> None:
    """
    Raises:
        ToolingError: If ``openssl`` is not on PATH
    """
    if not command_exists("openssl"):
        raise ToolingError(
            "OpenSSL not found in PATH",
            command="openssl",
            details=f"Install: {get_install_instructions('openssl')}",
        )


def ensure_private_key(key_path: Path) -> bool:
    """
    Generate the signing key if missing, then validate it.

    Returns:
        True if a new key was generated

    Raises:
        ToolingError: If generation fails or the key is invalid
    """
    ensure_dir(key_path.parent)

    generated = False
    if not key_path.exists():
        logger.info(f"Generating new RSA private key at {key_path}")
        exec_command(["openssl", "genrsa", "-out", str(key_path), str(KEY_BITS)])
        generated = True
    else:
        logger.info("Using existing private key")

    try:
        exec_command(["openssl", "rsa", "-check", "-noout", "-in", str(key_path)])
    except ToolingError as e:
        raise ToolingError("Private key validation failed", command=e.command, details=e.details)

    return generated


def generate_signature(key_path: Path, script_path: Path) -> str:
    """Base64 SHA-512 signature of ``script_path``."""
    if not script_path.exists():
        raise ToolingError(f"Script file not found: {script_path}. Run 'vidplug build' first.")

    raw = exec_command(
        ["openssl", "dgst", "-sha512", "-sign", str(key_path), str(script_path)],
        text=False,
    )
    return base64.b64encode(raw).decode("ascii")


def strip_pem(pem: str) -> str:
    """PEM body without the BEGIN/END lines and line breaks."""
    lines = [
        line.strip()
        for line in pem.splitlines()
        if line.strip() and "BEGIN" not in line and "END" not in line
    ]
    return "".join(lines)


def extract_public_key(key_path: Path) -> str:
    pem = exec_command(["openssl", "rsa", "-pubout", "-outform", "PEM", "-in", str(key_path)])
    return strip_pem(pem)


def sign_plugin(layout: ProjectLayout) -> SigningResult:
    """
    Sign ``dist/script.js`` and record the signature in ``dist/config.json``.

    Args:
        layout: Project paths

    Returns:
        Signing outcome including the updated config

    Raises:
        ToolingError: If OpenSSL is missing or any signing step fails
        ConfigurationError: If the built config cannot be read or written
    """
    check_openssl()
    layout.require_dist()

    key_path = layout.private_key_path
    generated = ensure_private_key(key_path)
    signature = generate_signature(key_path, layout.dist_script_path)
    public_key = extract_public_key(key_path)

    config = ConfigManager(layout.dist_config_path).update(
        script_signature=signature,
        script_public_key=public_key,
    )
    logger.info(f"Signed {config.name} (signature {len(signature)} chars)")

    return SigningResult(key_path, generated, signature, public_key, config)


__all__ = [
    "SigningResult",
    "check_openssl",
    "ensure_private_key",
    "generate_signature",
    "strip_pem",
    "extract_public_key",
    "sign_plugin",
]
