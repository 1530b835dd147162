import re
from collections import Counter


class RideLog:
    """
    Receives every broker publication as an independent "recorder" and
    keeps what a ride report needs: cue triggers, floor trajectory, stops,
    mission updates and a time-ordered event log.
    """
    def __init__(self, env, broadcast_pipe):
        self.env = env
        self.broadcast_pipe = broadcast_pipe
        self.cues = []            # (time, cue)
        self.trajectories = {}    # {elevator_name: [(time, floor)]}
        self.stops = {}           # {elevator_name: [(time, floor)]}
        self.mission_updates = []  # (time, target, streak)
        self.event_log = []
        self._serving = {}

    def _add_event_log(self, event_type, event_data):
        self.event_log.append({
            "time": self.env.now,
            "type": event_type,
            "data": event_data
        })

    def start_listening(self):
        """
        Main process intercepting global broadcasts.
        """
        while True:
            data = yield self.broadcast_pipe.get()
            self.record(data.get('topic', ''), data.get('message', {}))

    def record(self, topic, message):
        if topic == "announcer/cue":
            self.cues.append((message.get('timestamp'), message.get('cue')))
            self._add_event_log('cue', message)
            return

        if topic == "mission/update":
            self.mission_updates.append((message.get('timestamp'), message.get('target'), message.get('streak')))
            self._add_event_log('mission', message)
            return

        status_match = re.search(r'elevator/(.*?)/status', topic)
        if status_match:
            elevator_name = status_match.group(1)
            timestamp = message.get('timestamp')
            floor = message.get('current_floor')

            trajectory = self.trajectories.setdefault(elevator_name, [])
            if not trajectory or trajectory[-1][1] != floor:
                trajectory.append((timestamp, floor))

            # A stop starts on the rising edge of serving_stop
            serving = bool(message.get('serving_stop'))
            was_serving = self._serving.get(elevator_name, False)
            self._serving[elevator_name] = serving
            if serving and not was_serving:
                stops = self.stops.setdefault(elevator_name, [])
                stops.append((timestamp, floor))
                self._add_event_log('arrival', {'elevator': elevator_name, 'floor': floor})
            return

        command_match = re.search(r'elevator/(.*?)/command', topic)
        if command_match:
            self._add_event_log('command', dict(message, elevator=command_match.group(1)))

    def cue_counts(self):
        return Counter(cue for _, cue in self.cues)

    def stop_sequence(self, elevator_name):
        return [floor for _, floor in self.stops.get(elevator_name, [])]

    def print_summary(self):
        print("\n" + "=" * 60)
        print("   RIDE SUMMARY")
        print("=" * 60)
        for elevator_name, stops in self.stops.items():
            floors = [floor for _, floor in stops]
            print(f"{elevator_name}: {len(floors)} stop(s) {floors}")
            trajectory = self.trajectories.get(elevator_name, [])
            print(f"  Floors visited: {[floor for _, floor in trajectory]}")
        print("\nCues:")
        for cue, count in sorted(self.cue_counts().items()):
            print(f"  {cue:<18} {count:>4}")
        if self.mission_updates:
            _, target, streak = self.mission_updates[-1]
            print(f"\nMission: streak {streak}, next target floor {target}")
        print("=" * 60)
