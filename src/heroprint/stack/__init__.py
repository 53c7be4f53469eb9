from .core import StackContext, SignatureCatalog, stack_signature
from .detector import detect_stack
from .registry import StackRegistry

__all__ = ["StackContext", "SignatureCatalog", "stack_signature", "detect_stack", "StackRegistry"]
