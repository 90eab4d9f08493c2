from trimlin.trimlin_main import trimlin_run

trimlin_run()
