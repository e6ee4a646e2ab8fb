"""Alarm with an enum priority.

This example binds a `Priority` enum to the `priority` attribute of an
in-memory document and shows how members carry behavior.
"""

import logging

import classy_enum as ce


# Define an enum: the direct subclass is the enum, its subclasses the members
class Priority(ce.ClassyEnum):
    def send_email(self) -> bool:
        return False


class Low(Priority):
    pass


class Medium(Priority):
    pass


class High(Priority):
    def send_email(self) -> bool:
        return True


# Bind the enum to the model; `priority` resolves `Priority` by name
class Alarm(ce.Document):
    priority = ce.enum_attr(default="low")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    alarm = Alarm()
    print(alarm.priority, alarm.priority.send_email())

    alarm.priority = High
    print(alarm.priority, alarm.priority.send_email(), alarm.attributes)

    alarm.priority = "urgent"
    print(alarm.save(), alarm.errors)
    print(Priority.select_options())
