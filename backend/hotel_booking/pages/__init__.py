# Page flow objects
