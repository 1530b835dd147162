import simpy

class MessageBroker:
    """
    Mediates communication between the ride engine and its collaborators.
    Implements a topic-based publish-subscribe model.

    Publishing never blocks. Each pipe keeps at most ``backlog`` unread
    messages; once a pipe is full the oldest unread message is dropped, so
    publish-only topics (status, cues) stay bounded over a ride of any length.

    Topics used by the engine:
        announcer/cue              cue trigger events for the sound player
        elevator/<name>/status     display snapshots
        elevator/<name>/command    commands submitted by the UI
        mission/update             new mission target and streak
    """
    DEFAULT_BACKLOG = 1000

    def __init__(self, env: simpy.Environment, verbose: bool = True, backlog: int = DEFAULT_BACKLOG):
        """
        Initialize the message broker

        Args:
            env (simpy.Environment): SimPy environment
            verbose (bool): Print every publish
            backlog (int): Unread messages kept per pipe
        """
        if backlog < 1:
            raise ValueError("backlog must be at least 1")
        self.env = env
        self.verbose = verbose
        self.backlog = backlog
        self.topics = {}  # Dictionary to hold Store for each topic
        self.broadcast_pipe = simpy.Store(self.env)

    def get_pipe(self, topic: str) -> simpy.Store:
        """
        Get or create a communication pipe (Store) for the specified topic
        """
        if topic not in self.topics:
            self.topics[topic] = simpy.Store(self.env)
        return self.topics[topic]

    def put(self, topic: str, message):
        """
        Publish (put) a message to the specified topic
        """
        if self.verbose:
            print(f"{self.env.now:>7} [Broker] Publish on '{topic}': {message}")
        pipe = self.get_pipe(topic)
        self.broadcast_pipe.put({'topic': topic, 'message': message})
        self._drop_oldest(self.broadcast_pipe)
        event = pipe.put(message)
        self._drop_oldest(pipe)
        return event

    def _drop_oldest(self, pipe: simpy.Store):
        # Store.put appends synchronously; trim what nobody has read yet
        overflow = len(pipe.items) - self.backlog
        if overflow > 0:
            del pipe.items[:overflow]

    def get(self, topic: str):
        """
        Wait to receive (get) a message from the specified topic
        """
        pipe = self.get_pipe(topic)
        return pipe.get()

    def published(self, topic: str) -> list:
        """
        Messages sitting unread in a topic pipe (oldest first)
        """
        return list(self.get_pipe(topic).items)

    def get_broadcast_pipe(self) -> simpy.Store:
        """
        Returns the global broadcast pipe (used by RideLog)
        """
        return self.broadcast_pipe
