"""Text formatting of vectors, matrices and linear models

All functions are pure: the numeric formatting is controlled only through the arguments, never through module or
stream state.

Numeric fields are right-justified in a column of ``width`` characters. ``precision`` is the number of digits after
the decimal point for the ``scientific`` and ``fixed`` notations and the number of significant digits for
``general``.
"""
import numpy as np

notation_formats = {'scientific': 'e',
                    'fixed': 'f',
                    'general': 'g'}


def format_number(value, precision=10, width=20, notation='scientific'):
    try:
        spec = notation_formats[notation]
    except KeyError:
        raise ValueError('Unknown notation %s. Use one of %s' % (notation, list(notation_formats.keys())))
    return '{0:>{1:d}.{2:d}{3:s}}'.format(float(value), width, precision, spec)


def format_vector(values, precision=10, width=20, notation='scientific'):
    """
    Column vector in bracketed assignment syntax, one entry per line

    Example:
        >>> format_vector([1., 2.], precision=2, width=10)
        '[  1.00e+00;\\n   2.00e+00]'
    """
    values = np.atleast_1d(np.asarray(values, dtype=float))
    fields = [format_number(v, precision, width, notation) for v in values]
    return '[' + ';\n '.join(fields) + ']'


def format_matrix(matrix, precision=10, width=20, notation='scientific'):
    """
    Matrix in bracketed assignment syntax: entries in a row are comma separated and rows are separated by ``;`` and
    a new line.

    Args:
        matrix (np.ndarray): 2D array (a 1D array is taken as a single row)
        precision (int): digits of the numeric fields
        width (int): column width of each field
        notation (str): ``scientific``, ``fixed`` or ``general``

    Returns:
        str: formatted matrix
    """
    matrix = np.asarray(matrix, dtype=float)
    if matrix.ndim == 1:
        matrix = matrix.reshape(1, -1)
    if matrix.size == 0:
        return '[]'

    rows = []
    for row in matrix:
        rows.append(','.join([format_number(v, precision, width, notation) for v in row]))
    return '[' + ';\n '.join(rows) + ']'


def scicos_script(name, model, precision=10, width=20):
    """
    Scilab script that assigns the reference point and the linear system to the structure ``name``::

        <name>.x0=..
        [ ... ];
        <name>.u0=..
        [ ... ];
        <name>.sys = syslin('c',..
        [A],..
        [B],..
        [C],..
        [D]);
        <name>.tfm = ss2tf(<name>.sys);

    Args:
        name (str): identifier of the solved configuration
        model (trimlin.linear.src.libss.LinearModel): linear model
        precision (int): digits after the decimal point
        width (int): column width

    Returns:
        str: script text
    """
    fmt = dict(precision=precision, width=width, notation='scientific')
    script = ''
    script += name + '.x0=..\n' + format_vector(model.x0, **fmt) + ';\n'
    script += name + '.u0=..\n' + format_vector(model.u0, **fmt) + ';\n'
    script += name + ".sys = syslin('c',..\n"
    script += format_matrix(model.A, **fmt) + ',..\n'
    script += format_matrix(model.B, **fmt) + ',..\n'
    script += format_matrix(model.C, **fmt) + ',..\n'
    script += format_matrix(model.D, **fmt) + ');\n'
    script += name + '.tfm = ss2tf(' + name + '.sys);\n'
    return script


def console_matrices(model, precision=3, width=10):
    """A, B, C and D of ``model`` in fixed notation for echoing to screen"""
    fmt = dict(precision=precision, width=width, notation='fixed')
    out = ''
    for mat_name in ['A', 'B', 'C', 'D']:
        out += '\n' + mat_name + '=\n' + format_matrix(getattr(model, mat_name), **fmt) + '\n'
    return out
