"""
Sample mazes, by name.

"example" is the published 23x23 maze: longest hike 94 with slopes
enforced, 154 with slopes ignored.
"""

EXAMPLE = """\
#.#####################
#.......#########...###
#######.#########.#.###
###.....#.>.>.###.#.###
###v#####.#v#.###.#.###
###.>...#.#.#.....#...#
###v###.#.#.#########.#
###...#.#.#.......#...#
#####.#.#.#######.#.###
#.....#.#.#.......#...#
#.#####.#.#.#########v#
#.#...#...#...###...>.#
#.#.#v#######v###.###v#
#...#.>.#...>.>.#.###.#
#####v#.#.###v#.#.###.#
#.....#...#...#.#.#...#
#.#########.###.#.#.###
#...###...#...#...#.###
###.###.#.###v#####v###
#...#...#.#.>.>.#.>.###
#.###.###.#.###.#.#v###
#.....###...###...#...#
#####################.#
"""

# One winding corridor of 12 steps, no junctions
CORRIDOR = """\
#.#####
#.....#
#####.#
#.....#
#.#####
"""

# Two corridors between (1, 1) and (3, 3): 8 steps over the top, 4 on the left
LOOP = """\
#.#####
#.....#
#.###.#
#.....#
###.###
"""

# LOOP with the top corridor only walkable from (3, 3) back to (1, 1)
ONE_WAY_LOOP = """\
#.#####
#.<...#
#.###.#
#.....#
###.###
"""

# The only step between entrance and exit runs uphill
UPHILL = """\
#.#
#^#
#.#
"""

# The entrance leads into a dead end
WALLED_IN = """\
#.###
#.#.#
###.#
###.#
"""

SINGLE_ROW = "#.#\n"

LAYOUTS = dict(
    example=EXAMPLE,
    corridor=CORRIDOR,
    loop=LOOP,
    one_way_loop=ONE_WAY_LOOP,
    uphill=UPHILL,
    walled_in=WALLED_IN,
    single_row=SINGLE_ROW,
)
