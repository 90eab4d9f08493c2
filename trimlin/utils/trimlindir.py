import os

TrimlinDir = os.path.abspath(os.path.dirname(os.path.realpath(__file__)) + '/../../')
