"""Essence - YAML schema to Atlas HCL compiler."""

__version__ = "0.3.0"

from essence.compiler import Compiler, compile_schema
from essence.config import CompilerConfig
from essence.template import generate_template

__all__ = ["Compiler", "CompilerConfig", "compile_schema", "generate_template", "__version__"]
