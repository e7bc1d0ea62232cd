import sys
import time

import mido

from midi_perform.midi import DecodeError, decode, format_bytes

# Print decoded notes from a MIDI input, in the mapping file's note-name format.
names = mido.get_input_names()
if not names:
    print('No MIDI input devices')
    sys.exit(1)
name = sys.argv[1] if len(sys.argv) > 1 else names[0]
print('listening on:', name)


def show(msg):
    raw = bytes(msg.bytes())
    try:
        m = decode(raw)
    except DecodeError as e:
        print(f"{format_bytes(raw):<10} {e}")
        return
    print(f"{format_bytes(raw):<10} {m.event.value:<8} ch={m.channel} note={m.note.name} ({m.note.index()}) vel={m.velocity}")


with mido.open_input(name, callback=show):
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
