"""CORE lexical, syntax and evaluation rules."""
