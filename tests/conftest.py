"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import Mock

import pytest


SQUARE_SVG = '''<?xml version="1.0" encoding="utf-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10">
  <rect x="2" y="2" width="4" height="4" fill="red"/>
</svg>'''

NESTED_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="20" height="20" viewBox="0 0 10 10">
  <!-- a comment -->
  <title>Nested &amp; styled</title>
  <style type="text/css"><![CDATA[g > rect { fill: blue; }]]></style>
  <g id="outer" transform="translate(1, 1)" style="fill: #00ff00">
    <polyline points="0,0 4,0 4,4" fill-rule="evenodd"/>
    <g id="hidden" visibility="hidden">
      <rect width="2" height="2"/>
    </g>
  </g>
  <defs><circle id="dot" r="3"/></defs>
</svg>'''


@pytest.fixture
def backend():
    return Mock(spec=['render'])
