"""trimlin_main: Where it all starts

"""
import warnings
import sys
import trimlin.utils.cout_utils as cout
from .version import __version__


def build_parser():
    import argparse
    from trimlin.trim.trimmer import TrimMode

    parser = argparse.ArgumentParser(prog='trimlin', description=
    """Trims a nonlinear flight dynamics model and linearises it about the trim point.\n
    Without a settings file, the reference aircraft is trimmed in straight and level flight.""")
    parser.add_argument('input_filename', help='path to the *.trimlin input file', type=str, nargs='?',
                        default='')
    parser.add_argument('-a', '--aircraft', help='aircraft identifier, also used as case name', type=str,
                        default=None)
    parser.add_argument('--altitude', help='altitude, ft', type=float, default=None)
    parser.add_argument('--velocity', help='true airspeed, ft/s', type=float, default=None)
    parser.add_argument('--gamma', help='flight path angle, deg', type=float, default=None)
    parser.add_argument('--mode', help='trim mode', choices=[mode.value for mode in TrimMode], default=None)
    parser.add_argument('--bank-angle', dest='bank_angle', help='bank angle in turning mode, deg', type=float,
                        default=None)
    parser.add_argument('--rtol', help='relative tolerance of the trim', type=float, default=None)
    parser.add_argument('--abstol', help='absolute tolerance of the trim', type=float, default=None)
    parser.add_argument('--max-iter', dest='max_iter', help='maximum number of trim iterations', type=int,
                        default=None)
    parser.add_argument('-o', '--output', help='output folder', type=str, default=None)
    parser.add_argument('-v', '--version', action='version',
                        version='Running %(prog)s version {version}'.format(version=__version__))
    return parser


def main(args=None, trimlin_input_dict=None):
    """
    Main ``trimlin`` routine

    It reads the settings included in the ``.trimlin`` file parsed as an argument, or an equivalent dictionary given
    as ``trimlin_input_dict``, and runs the solvers of the ``flow`` in order. Without either, the default flow is run
    on the reference aircraft.

    Args:
        args (list(str)): command line, ``sys.argv`` style
        trimlin_input_dict (dict): ``dict`` with the same contents as the ``.trimlin`` file would have.

    Returns:
        trimlin.pretrim.pretrim.PreTrim: object containing the plant, trim solution and linear model.

    """
    import time
    import logging
    import os

    import trimlin.utils.input_arg as input_arg
    import trimlin.utils.solver_interface as solver_interface
    from trimlin.pretrim.pretrim import PreTrim
    from trimlin.utils.cout_utils import start_writer, finish_writer

    # Loading solvers, postprocessors and plants
    import trimlin.solvers
    import trimlin.postproc
    import trimlin.plants
    # ------------

    try:
        # output writer
        start_writer()
        # timing
        t = time.process_time()
        t0_wall = time.perf_counter()

        if trimlin_input_dict is None:
            parser = build_parser()
            if args is not None:
                args = parser.parse_args(args[1:])
            else:
                args = parser.parse_args()
            settings = input_arg.read_settings(args)
        else:
            settings = trimlin_input_dict
            input_arg.check_flow(settings)

        # run preTrim
        data = PreTrim(settings)

        # Loop for the solvers specified in *.trimlin['TrimLin']['flow']
        solvers = dict()
        for solver_name in settings['TrimLin']['flow']:
            solvers[solver_name] = solver_interface.initialise_solver(solver_name)
            solvers[solver_name].initialise(data)
            data = solvers[solver_name].run(solvers=solvers)
            solvers[solver_name].teardown()

        cpu_time = time.process_time() - t
        wall_time = time.perf_counter() - t0_wall
        cout.cout_wrap('FINISHED - Elapsed time = %f6 seconds' % wall_time, 2)
        cout.cout_wrap('FINISHED - CPU process time = %f6 seconds' % cpu_time, 2)
        finish_writer()

    except Exception as e:
        try:
            logdir = settings['TrimLin']['log_folder'] + '/' + settings['TrimLin']['case']
        except (KeyError, TypeError):
            logdir = './'
        except NameError:
            logdir = './'
        logdir = os.path.abspath(logdir)
        if not os.path.isdir(logdir):
            logdir = os.path.abspath('./')
        cout.cout_wrap(('Exception raised, writing error log in %s/error.log' % logdir), 4)
        logging.basicConfig(filename='%s/error.log' % logdir,
                            filemode='w',
                            format='%(asctime)s-%(levelname)s-%(message)s',
                            datefmt='%d-%b-%y %H:%M:%S',
                            level=logging.INFO)
        logging.info('trimlin Error Log')
        logging.error("Exception occurred", exc_info=True)
        raise e

    return data


def trimlin_run():
    """
    This is a wrapper function for the console command "trimlin"
    """
    with warnings.catch_warnings():
        warnings.simplefilter('ignore')
        main(sys.argv)
