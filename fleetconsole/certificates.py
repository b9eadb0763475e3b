#!/usr/bin/env python3
"""
SSL Certificate Management for fleetconsole Server
"""

import logging
import socket
import ssl
import subprocess
from pathlib import Path
from typing import Optional

logger = logging.getLogger("fleetconsole.server")


def detect_external_ip() -> str:
    """Detect current machine's outward-facing IP address."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            s.connect(("8.8.8.8", 80))
            return s.getsockname()[0]
    except OSError as e:
        logger.debug(f"external IP detection failed: {e}")
    return "127.0.0.1"


def generate_test_certificates(cert_path: Path, key_path: Path) -> bool:
    """Generate a self-signed certificate with openssl for test mode."""
    external_ip = detect_external_ip()
    logger.info(f"Auto-generating test certificates for IP: {external_ip}")
    cert_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = [
        'openssl', 'req', '-x509', '-newkey', 'rsa:2048',
        '-keyout', str(key_path), '-out', str(cert_path),
        '-days', '365', '-nodes', '-subj', '/CN=fleetconsole',
        '-addext', f'subjectAltName=IP:{external_ip},IP:127.0.0.1,DNS:localhost'
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=30)
    except (OSError, subprocess.SubprocessError) as e:
        logger.error(f"Certificate generation error: {e}")
        return False
    if result.returncode != 0:
        logger.error(f"Certificate generation failed: {result.stderr}")
        return False

    try:
        key_path.chmod(0o600)
        cert_path.chmod(0o644)
    except OSError as e:
        logger.warning(f"Failed to set certificate permissions: {e}")

    logger.info(f"Generated test certificates: cert={cert_path}, key={key_path}")
    return True


def get_ssl_context(use_tls: bool, test_mode: bool, cert_path: Path, key_path: Path) -> Optional[ssl.SSLContext]:
    """Create SSL context for HTTPS if TLS is enabled and certificates exist."""
    if not use_tls:
        return None

    if not cert_path.exists() or not key_path.exists():
        if not test_mode:
            logger.warning("TLS enabled but certificate files not found: cert=%s, key=%s", cert_path, key_path)
            logger.warning("Server will start without TLS. Generate certificates or set use_tls=false")
            return None
        logger.info("Test mode: auto-generating HTTPS certificates")
        if not generate_test_certificates(cert_path, key_path):
            logger.warning("Failed to generate test certificates. Server will start without TLS.")
            return None

    ssl_context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    ssl_context.load_cert_chain(str(cert_path), str(key_path))
    logger.info("TLS enabled with cert=%s, key=%s", cert_path, key_path)
    return ssl_context
