from .download_contracts.download_contracts import main

raise SystemExit(main())
