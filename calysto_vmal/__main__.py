from .kernel import CalystoVMAL

CalystoVMAL.run_as_main()
