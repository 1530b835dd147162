import simpy
from abc import ABC, abstractmethod
import itertools


class Entity(ABC):
    """
    Abstract base class for entities in SimPy simulation.

    Provides a name, a unique ID, a logged state string and the SimPy
    process running the entity's run() generator.
    """
    # Entity ID counter shared across all class instances
    _entity_id_counter = itertools.count()

    def __init__(self, env: simpy.Environment, name: str = None):
        """
        Initialize the entity.

        Args:
            env: The SimPy simulation environment this entity belongs to.
            name: Entity name. Optional. If not specified, auto-generated from class name and ID.
        """
        self.env = env
        self.entity_id: int = next(self._entity_id_counter)
        self.name: str = name if name is not None else f"{self.__class__.__name__}_{self.entity_id}"

        # Concrete classes call set_state() with their real initial state
        self.state: str = "initial_state"

        # run() is started here; subclasses must set their attributes before calling super().__init__
        self._process = self.env.process(self.run())

        print(f'{self.env.now:>7}: Entity "{self.name}" ({self.__class__.__name__}, ID:{self.entity_id}) created.')

    @abstractmethod
    def run(self):
        """
        Generator method that serves as the main SimPy process body for the entity.
        """
        pass

    # --- Common utility methods ---

    def set_state(self, new_state: str):
        """
        Transition the entity's state.

        Args:
            new_state: Target state for transition.
        """
        if self.state != new_state:
            old_state = self.state
            self.state = new_state
            self._on_state_changed(old_state, new_state)

    def _on_state_changed(self, old_state: str, new_state: str):
        """
        Hook called after every state change. Subclasses extend it and call super().
        """
        self._log_state_change(old_state, new_state)

    def _log_state_change(self, old_state: str, new_state: str):
        print(f'{self.env.now:>7}: Entity "{self.name}" ({self.__class__.__name__}, ID:{self.entity_id}) state transition: {old_state} -> {new_state}')
