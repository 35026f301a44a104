from held_karp_tsp.scripts.solve_tsp import main


if __name__ == '__main__':
    raise SystemExit(main())
