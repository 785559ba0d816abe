"""
Base Pass System

Passes take a whole Program tree and return a new one.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from ..shared.nodes import Node

logger = logging.getLogger("jsdeob.passes.base")


class BasePass(ABC):
    """
    Base class for all tree passes.

    - Passes never mutate their input tree; they return a new tree
    - A pass instance may be reused, but holds no state between runs
    """

    @abstractmethod
    def run(self, tree: Node) -> Node:
        """
        Run pass on a tree.

        Returns: New tree
        """
        raise NotImplementedError


class PassManager:
    """
    Runs registered passes in registration order.
    """

    def __init__(self):
        self.passes: List[BasePass] = []

    def register_pass(self, pass_instance: BasePass) -> None:
        """Register a pass"""
        self.passes.append(pass_instance)

    def run_all(self, tree: Node) -> Node:
        for pass_instance in self.passes:
            logger.debug(f"Running {type(pass_instance).__name__}")
            tree = pass_instance.run(tree)
        return tree
