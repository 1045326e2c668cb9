"""Command line entry point: ``snapshot-webhook`` / ``python -m snapshot_webhook``."""

import argparse
import logging
import sys

from snapshot_webhook import __version__
from snapshot_webhook.config import AuthMode, LogLevel, WebhookConfig
from snapshot_webhook.utils.errors import error_message

logger = logging.getLogger(__name__)


def setup_logging(level: LogLevel) -> None:
    """Configure logging for the server."""
    logging.basicConfig(
        level=level.value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse flags; each ``dest`` is the WebhookConfig field it overrides."""
    parser = argparse.ArgumentParser(
        prog="snapshot-webhook",
        description="Validating admission webhook for VolumeGroupSnapshotClasses",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    serving = parser.add_argument_group("serving")
    serving.add_argument("--host", help="address to listen on (default: 0.0.0.0)")
    serving.add_argument("--port", type=int, help="secure port to listen on (default: 443)")
    serving.add_argument("--tls-cert-file", help="x509 certificate for HTTPS")
    serving.add_argument(
        "--tls-private-key-file", help="x509 private key matching --tls-cert-file"
    )

    cluster = parser.add_argument_group("cluster access")
    cluster.add_argument(
        "--auth-mode", choices=[m.value for m in AuthMode], help="default: auto"
    )
    cluster.add_argument("--kubeconfig", dest="kubeconfig_path", help="kubeconfig file")
    cluster.add_argument("--context", dest="kubeconfig_context", help="kubeconfig context")

    parser.add_argument("--log-level", choices=[level.value for level in LogLevel])

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> WebhookConfig:
    """Flags that were given override the environment and defaults."""
    overrides = {field: value for field, value in vars(args).items() if value is not None}
    return WebhookConfig(**overrides)


def main(argv: list[str] | None = None) -> int:
    """Validate configuration and serve until interrupted."""
    args = parse_args(argv)

    try:
        config = build_config(args)
    except ValueError as e:
        setup_logging(LogLevel.INFO)
        logger.error(f"Configuration error: {error_message(e)}")
        return 1

    setup_logging(config.log_level)
    logger.info(f"Starting snapshot validation webhook v{__version__}")

    try:
        for warning in config.validate_auth_config() + config.validate_tls_config():
            logger.warning(warning)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    import uvicorn

    from snapshot_webhook.server import create_app

    scheme = "https" if config.tls_enabled else "http"
    logger.info(f"Serving on {scheme}://{config.host}:{config.port}")
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        ssl_certfile=str(config.tls_cert_file) if config.tls_cert_file else None,
        ssl_keyfile=str(config.tls_private_key_file) if config.tls_private_key_file else None,
        log_level=config.log_level.value.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
