"""
Shared pytest fixtures for tls_trust_defaults tests.

Certificates are generated per test session with `cryptography`, and the
platform default locations are pointed at temporary files through the
SSL_CERT_FILE / SSL_CERT_DIR environment variables that
`ssl.get_default_verify_paths()` honours.
"""

import hashlib
import ssl
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from tls_trust_defaults.defaults import GlobalTlsDefaults
from tls_trust_defaults.models import TrustAnchor, TrustStore

# =============================================================================
# Certificate Helpers
# =============================================================================


@dataclass(frozen=True)
class IssuedCertificate:
    """A generated certificate with its private key."""

    certificate: x509.Certificate
    private_key: ec.EllipticCurvePrivateKey

    @property
    def pem(self) -> bytes:
        return self.certificate.public_bytes(serialization.Encoding.PEM)

    @property
    def der(self) -> bytes:
        return self.certificate.public_bytes(serialization.Encoding.DER)

    @property
    def fingerprint(self) -> str:
        return hashlib.sha256(self.der).hexdigest()

    @property
    def key_pem(self) -> bytes:
        return self.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def as_anchor(self) -> TrustAnchor:
        return TrustAnchor.from_der(self.der, subject=self.certificate.subject.rfc4514_string())


def _validity() -> tuple[datetime, datetime]:
    now: datetime = datetime.now(UTC)
    return now - timedelta(days=1), now + timedelta(days=30)


def make_certificate_authority(common_name: str) -> IssuedCertificate:
    """Create a self-signed CA certificate."""
    private_key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, 'TLS Trust Defaults Tests'),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])
    not_before, not_after = _validity()

    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .add_extension(
            x509.KeyUsage(
                digital_signature=True,
                content_commitment=False,
                key_encipherment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=True,
                crl_sign=True,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
        .add_extension(
            x509.SubjectKeyIdentifier.from_public_key(private_key.public_key()),
            critical=False,
        )
        .sign(private_key, hashes.SHA256())
    )
    return IssuedCertificate(certificate=certificate, private_key=private_key)


def make_server_certificate(
    issuer: IssuedCertificate,
    hostname: str = 'localhost',
) -> IssuedCertificate:
    """Create a leaf server certificate for `hostname` signed by `issuer`."""
    private_key = ec.generate_private_key(ec.SECP256R1())
    not_before, not_after = _validity()

    certificate = (
        x509.CertificateBuilder()
        .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, hostname)]))
        .issuer_name(issuer.certificate.subject)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .add_extension(x509.SubjectAlternativeName([x509.DNSName(hostname)]), critical=False)
        .add_extension(
            x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]),
            critical=False,
        )
        .add_extension(
            x509.SubjectKeyIdentifier.from_public_key(private_key.public_key()),
            critical=False,
        )
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(
                issuer.private_key.public_key()
            ),
            critical=False,
        )
        .sign(issuer.private_key, hashes.SHA256())
    )
    return IssuedCertificate(certificate=certificate, private_key=private_key)


# =============================================================================
# Certificate Fixtures
# =============================================================================


@pytest.fixture(scope='session')
def root_ca() -> IssuedCertificate:
    """CA that the simulated platform bundle trusts."""
    return make_certificate_authority('Test Root CA')


@pytest.fixture(scope='session')
def other_ca() -> IssuedCertificate:
    """Unrelated CA, trusted by nothing unless a test says so."""
    return make_certificate_authority('Other Root CA')


@pytest.fixture(scope='session')
def server_certificate(root_ca: IssuedCertificate) -> IssuedCertificate:
    """Leaf certificate for 'localhost' issued by root_ca."""
    return make_server_certificate(root_ca)


@pytest.fixture
def ca_bundle(tmp_path: Path, root_ca: IssuedCertificate) -> Path:
    """PEM bundle file containing root_ca."""
    bundle_path: Path = tmp_path / 'platform-bundle.pem'
    bundle_path.write_bytes(root_ca.pem)
    return bundle_path


@pytest.fixture
def other_bundle(tmp_path: Path, other_ca: IssuedCertificate) -> Path:
    """PEM bundle file containing other_ca."""
    bundle_path: Path = tmp_path / 'other-bundle.pem'
    bundle_path.write_bytes(other_ca.pem)
    return bundle_path


# =============================================================================
# Platform Location Fixtures
# =============================================================================


@pytest.fixture
def empty_cert_dir(tmp_path: Path) -> Path:
    cert_dir: Path = tmp_path / 'certs'
    cert_dir.mkdir()
    return cert_dir


@pytest.fixture
def platform_paths(
    monkeypatch: pytest.MonkeyPatch,
    ca_bundle: Path,
    empty_cert_dir: Path,
) -> tuple[Path, Path]:
    """
    Point the platform default locations at ca_bundle and an empty directory.

    Returns:
        The (cafile, capath) pair ssl.get_default_verify_paths() now reports.
    """
    monkeypatch.setenv('SSL_CERT_FILE', str(ca_bundle))
    monkeypatch.setenv('SSL_CERT_DIR', str(empty_cert_dir))
    return ca_bundle, empty_cert_dir


@pytest.fixture
def missing_platform_paths(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Point the platform default locations at paths that do not exist."""
    monkeypatch.setenv('SSL_CERT_FILE', str(tmp_path / 'missing' / 'bundle.pem'))
    monkeypatch.setenv('SSL_CERT_DIR', str(tmp_path / 'missing' / 'certs'))


# =============================================================================
# Trust Store Fixtures
# =============================================================================


@pytest.fixture
def tls_defaults() -> GlobalTlsDefaults:
    """Fresh defaults slot, isolated from the process-wide instance."""
    return GlobalTlsDefaults()


@pytest.fixture
def root_store(root_ca: IssuedCertificate, ca_bundle: Path) -> TrustStore:
    return TrustStore(anchors=(root_ca.as_anchor(),), cafile=ca_bundle)


@pytest.fixture
def other_store(other_ca: IssuedCertificate, other_bundle: Path) -> TrustStore:
    return TrustStore(anchors=(other_ca.as_anchor(),), cafile=other_bundle)


# =============================================================================
# Handshake Fixtures
# =============================================================================


@pytest.fixture
def server_context(
    tmp_path: Path,
    server_certificate: IssuedCertificate,
) -> ssl.SSLContext:
    """Server context presenting server_certificate."""
    cert_path: Path = tmp_path / 'server.pem'
    key_path: Path = tmp_path / 'server.key'
    cert_path.write_bytes(server_certificate.pem)
    key_path.write_bytes(server_certificate.key_pem)

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(certfile=str(cert_path), keyfile=str(key_path))
    return context


def _perform_handshake(
    client_context: ssl.SSLContext,
    server_context: ssl.SSLContext,
    hostname: str = 'localhost',
) -> None:
    client_in, client_out = ssl.MemoryBIO(), ssl.MemoryBIO()
    server_in, server_out = ssl.MemoryBIO(), ssl.MemoryBIO()
    client = client_context.wrap_bio(client_in, client_out, server_hostname=hostname)
    server = server_context.wrap_bio(server_in, server_out, server_side=True)

    client_done: bool = False
    server_done: bool = False
    for _ in range(20):
        if not client_done:
            try:
                client.do_handshake()
                client_done = True
            except ssl.SSLWantReadError:
                pass
        server_in.write(client_out.read())

        if not server_done:
            try:
                server.do_handshake()
                server_done = True
            except ssl.SSLWantReadError:
                pass
        client_in.write(server_out.read())

        if client_done and server_done:
            return

    raise AssertionError('TLS handshake did not complete')


@pytest.fixture
def handshake() -> Callable[..., None]:
    """In-memory TLS handshake between a client and a server context."""
    return _perform_handshake
