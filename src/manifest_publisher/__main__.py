"""Allow ``python -m manifest_publisher``."""

from manifest_publisher.main import main

main()
