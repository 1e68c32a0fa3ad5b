"""Allow ``python -m app`` to run the installer."""

from app.cli import main


raise SystemExit(main())
