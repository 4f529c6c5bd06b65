from rich.pretty import pprint

from flagship import *


def main():
    parser = ArgParser("parser", shell=True)
    parser.register_command("test")
    parser.set_description("test", "Test command")

    parser.parse_command()

    parser.register_flag("number", "n", ValueKind.INTEGER, "frame_count")
    parser.register_flag("text", "t", ValueKind.TEXT, "ghost.rkg")
    parser.register_flag("arg")
    parser.set_description("number", "Specify a number of frames")
    parser.set_description("text", "Specify a ghost")

    while parser.can_parse():
        flag = parser.parse_flags()
        match flag.value_kind:
            case ValueKind.INTEGER:
                print("Flag: '%s' found with numeric arg %d" % (flag.name, flag.value))
            case ValueKind.TEXT:
                print("Flag: '%s' found with string arg %s" % (flag.name, flag.value))
            case _:
                print("Flag: '%s' found" % flag.name)

    pprint(parser.result)


if __name__ == '__main__':
    main()
