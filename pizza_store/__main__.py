import sys

from pizza_store.cli import main

sys.exit(main())
