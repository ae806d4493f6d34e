"""Line-following robot logic: simulated board I/O, sensors, motors, behaviours, a state machine and a serial calibration console."""

__version__ = "0.1.0"