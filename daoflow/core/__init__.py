"""Core simulation primitives: quantum states, fields, flows, energy and resonance."""