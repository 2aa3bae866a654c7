#!/usr/bin/env python3
# usage: python main.py <dbname> <port> <user> [--init-schema]
# (same as the installed `pizza-store` command)

import sys

from pizza_store.cli import main

if __name__ == "__main__":
    sys.exit(main())
