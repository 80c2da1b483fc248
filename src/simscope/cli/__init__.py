# Copyright (c) Syntropy Systems
"""simscope command line interface."""
