"""Dispatch interfaces"""

from .dispatch_policy import IDispatchPolicy

__all__ = ['IDispatchPolicy']
