"""Instruction package.

This package contains the static, per-model system instructions used by the
enhancement engine. It does not decode prompts, build payloads or invoke any
model.
"""
