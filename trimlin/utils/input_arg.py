import os
import trimlin.utils.exceptions as exceptions
import trimlin.utils.cout_utils as cout

default_flow = ['PlantLoader', 'SimplexTrim', 'LinearStateSpace', 'SaveStateSpace']


def read_settings(args):
    """
    Settings of the run: those of ``args.input_filename`` if given, otherwise a default set for unattended runs.
    Flight condition and solver arguments given in the command line override the settings in either case.
    """
    if args.input_filename:
        case_settings = args.input_filename
        cout.cout_wrap('Running trimlin using the settings file: %s' % case_settings)
        settings = parse_settings(case_settings)
    else:
        cout.cout_wrap('Running trimlin using the default settings')
        settings = default_settings()

    apply_arguments(settings, args)
    return settings


def parse_settings(file):
    from trimlin.utils.settings import load_config_file
    settings = load_config_file(os.path.realpath(file))
    try:
        settings['TrimLin']['flow']
    except KeyError:
        raise exceptions.NotValidInputFile('The solver file does not contain a TrimLin header.')

    check_flow(settings)
    return settings


def check_flow(settings):
    from trimlin.utils.solver_interface import dict_of_solvers

    flow = settings['TrimLin']['flow']
    if isinstance(flow, str):
        flow = [solver.strip() for solver in flow.split(',') if solver.strip()]
    for solver in flow:
        # Check that the solvers in the flow exist and that they have a valid set of settings
        try:
            dict_of_solvers[solver]
        except KeyError:
            raise exceptions.SolverNotFound(solver)

        try:
            settings[solver]
        except KeyError:
            raise exceptions.NotValidInputFile('The settings for the solver %s have not been given.' % solver)


def default_settings(aircraft='generic_jet', output='./output'):
    """
    Settings dictionary of the default flow: load the reference plant, trim it in straight and level flight,
    linearise and write the Scilab script.
    """
    settings = dict()
    settings['TrimLin'] = {'case': aircraft,
                           'route': './',
                           'flow': list(default_flow),
                           'write_screen': True,
                           'write_log': False,
                           'log_folder': output}
    settings['PlantLoader'] = {'plant_id': 'SimpleAircraft',
                               'plant_settings': {'aircraft': aircraft}}
    settings['SimplexTrim'] = dict()
    settings['LinearStateSpace'] = dict()
    settings['SaveStateSpace'] = {'folder': output}
    return settings


def apply_arguments(settings, args):
    """Overrides ``settings`` with the command line arguments that were given"""
    def section(name):
        if name not in settings:
            settings[name] = dict()
        return settings[name]

    if args.aircraft is not None:
        settings['TrimLin']['case'] = args.aircraft
        plant_loader = section('PlantLoader')
        if 'plant_settings' not in plant_loader:
            plant_loader['plant_settings'] = dict()
        plant_loader['plant_settings']['aircraft'] = args.aircraft

    trim_arguments = {'altitude': args.altitude,
                      'velocity': args.velocity,
                      'gamma': args.gamma,
                      'mode': args.mode,
                      'bank_angle': args.bank_angle,
                      'rtol': args.rtol,
                      'abstol': args.abstol,
                      'max_iter': args.max_iter}
    for k, v in trim_arguments.items():
        if v is not None:
            section('SimplexTrim')[k] = v

    if args.altitude is not None or args.velocity is not None:
        plant_settings = section('PlantLoader').setdefault('plant_settings', dict())
        if args.altitude is not None:
            plant_settings['altitude'] = args.altitude
        if args.velocity is not None:
            plant_settings['velocity'] = args.velocity

    if args.output is not None:
        settings['TrimLin']['log_folder'] = args.output
        section('SaveStateSpace')['folder'] = args.output

    return settings
