from rn_scaffold.pipeline import main

main()
