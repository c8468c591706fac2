#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Stamp placed fields onto the first page of a PDF.
"""

import sys

import pdf_field_overlay.cli


if __name__ == "__main__":
	sys.exit(pdf_field_overlay.cli.main())
