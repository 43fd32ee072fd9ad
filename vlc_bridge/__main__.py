# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

from .main import run


if __name__ == "__main__":
    run()
